from .client_service import ClientService
from .time_entry_service import TimeEntryService
from .report_service import ReportService
from .report_export_service import ReportExportService

__all__ = [
    "ClientService",
    "TimeEntryService",
    "ReportService",
    "ReportExportService",
]
