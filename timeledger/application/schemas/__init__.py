from .client import ClientCreate, ClientUpdate, ClientResponse, ClientPageResponse
from .time_entry import (
    TimeEntryCreate,
    TimeEntryUpdate,
    TimeEntryResponse,
    TimeEntryPageResponse,
)
from .report import (
    MonthlyReportSchema,
    ClientReportSchema,
    ReportSummaryResponse,
    DetailRowSchema,
)

__all__ = [
    "ClientCreate",
    "ClientUpdate",
    "ClientResponse",
    "ClientPageResponse",
    "TimeEntryCreate",
    "TimeEntryUpdate",
    "TimeEntryResponse",
    "TimeEntryPageResponse",
    "MonthlyReportSchema",
    "ClientReportSchema",
    "ReportSummaryResponse",
    "DetailRowSchema",
]
