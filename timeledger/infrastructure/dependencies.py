"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator

from fastapi import Depends, Header, HTTPException, status

from timeledger.config import get_settings
from timeledger.application.interfaces import RecordStoreGateway, ReportArchive, ReportRenderer
from timeledger.application.services import (
    ClientService,
    ReportExportService,
    ReportService,
    TimeEntryService,
)
from timeledger.infrastructure.database.session import session_scope
from timeledger.infrastructure.database.repositories import SQLAlchemyRecordStore
from timeledger.infrastructure.hosted_store import HostedRecordStore
from timeledger.infrastructure.reports.pdf_report_renderer import PdfReportRenderer
from timeledger.infrastructure.storage.local_report_storage import LocalReportStorage


async def get_current_user_id(
    x_user_id: str | None = Header(None, alias="X-User-Id"),
) -> str:
    """Account identifier set by the identity proxy in front of the API."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    return x_user_id.strip()


async def get_record_store(
    user_id: str = Depends(get_current_user_id),
) -> AsyncGenerator[RecordStoreGateway, None]:
    """Provides the configured record store, scoped to the requesting account.

    Only the database backend opens a session; it commits after the handler
    returns and rolls back if the handler raised.
    """
    settings = get_settings()
    if settings.record_store_backend == "hosted":
        yield HostedRecordStore(
            base_url=settings.hosted_store_url,
            api_key=settings.hosted_store_api_key,
            user_id=user_id,
            timeout=settings.hosted_store_timeout,
        )
        return

    async with session_scope() as session:
        yield SQLAlchemyRecordStore(session, user_id)


async def get_client_service(
    gateway: RecordStoreGateway = Depends(get_record_store),
    user_id: str = Depends(get_current_user_id),
) -> AsyncGenerator[ClientService, None]:
    yield ClientService(gateway, user_id)


async def get_time_entry_service(
    gateway: RecordStoreGateway = Depends(get_record_store),
    user_id: str = Depends(get_current_user_id),
) -> AsyncGenerator[TimeEntryService, None]:
    yield TimeEntryService(gateway, user_id)


async def get_report_service(
    gateway: RecordStoreGateway = Depends(get_record_store),
) -> AsyncGenerator[ReportService, None]:
    """Provides a ReportService paging through the store at the configured size."""
    settings = get_settings()
    yield ReportService(gateway, page_size=settings.report_page_size)


def get_report_renderer() -> ReportRenderer:
    return PdfReportRenderer(currency=get_settings().report_currency)


async def get_report_export_service(
    report_service: ReportService = Depends(get_report_service),
    renderer: ReportRenderer = Depends(get_report_renderer),
    user_id: str = Depends(get_current_user_id),
) -> AsyncGenerator[ReportExportService, None]:
    """Provides a ReportExportService; archiving is enabled by the archive_reports setting."""
    settings = get_settings()
    archive: ReportArchive | None = None
    if settings.archive_reports:
        archive = LocalReportStorage(settings.report_output_dir)
    yield ReportExportService(
        report_service=report_service,
        renderer=renderer,
        user_id=user_id,
        archive=archive,
        currency=settings.report_currency,
    )
