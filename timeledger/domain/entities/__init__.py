from .client import Client
from .time_entry import TimeEntry
from .page import Page
from .report import (
    ReportFilters,
    MonthlyReport,
    ClientReport,
    ReportSummary,
    DetailRow,
    RenderedReport,
)

__all__ = [
    "Client",
    "TimeEntry",
    "Page",
    "ReportFilters",
    "MonthlyReport",
    "ClientReport",
    "ReportSummary",
    "DetailRow",
    "RenderedReport",
]
