from .record_store_gateway import RecordStoreGateway, check_pagination
from .report_archive import ReportArchive
from .report_renderer import ReportRenderer

__all__ = [
    "RecordStoreGateway",
    "check_pagination",
    "ReportArchive",
    "ReportRenderer",
]
