"""Report endpoints — summary JSON, detail rows and PDF download."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from timeledger.config import get_settings
from timeledger.application.schemas.report import DetailRowSchema, ReportSummaryResponse
from timeledger.application.services import ReportExportService, ReportService
from timeledger.application.services.report_service import build_detail_rows
from timeledger.domain.entities import ReportFilters
from timeledger.domain.exceptions import (
    InvalidReportFiltersError,
    RenderFailedError,
    ReportGenerationError,
)
from timeledger.infrastructure.dependencies import (
    get_current_user_id,
    get_report_export_service,
    get_report_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/reports",
    tags=["Reports"],
    dependencies=[Depends(get_current_user_id)],
)


def get_report_filters(
    year: int = Query(..., description="Reporting year"),
    month: int | None = Query(None, description="Restrict to one month (1-12)"),
    client_id: list[str] | None = Query(None, description="Repeat to select several clients"),
) -> ReportFilters:
    try:
        return ReportFilters.build(year=year, month=month, client_ids=client_id or ())
    except InvalidReportFiltersError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.get("/summary", response_model=ReportSummaryResponse)
async def get_report_summary(
    filters: ReportFilters = Depends(get_report_filters),
    service: ReportService = Depends(get_report_service),
) -> ReportSummaryResponse:
    """Totals for the period plus monthly and per-client breakdowns."""
    try:
        summary = await service.generate_report(filters)
    except ReportGenerationError:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to generate report"
        )
    return ReportSummaryResponse.model_validate(summary, from_attributes=True)


@router.get("/entries", response_model=list[DetailRowSchema])
async def get_report_entries(
    filters: ReportFilters = Depends(get_report_filters),
    service: ReportService = Depends(get_report_service),
) -> list[DetailRowSchema]:
    """Line items of the period, newest first."""
    try:
        entries = await service.get_detailed_entries(filters)
    except ReportGenerationError:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to generate report"
        )
    rows = build_detail_rows(entries, default_currency=get_settings().report_currency)
    rows.sort(key=lambda row: row.date, reverse=True)
    return [DetailRowSchema.model_validate(row, from_attributes=True) for row in rows]


@router.get(
    "/pdf",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
)
async def download_report_pdf(
    filters: ReportFilters = Depends(get_report_filters),
    service: ReportExportService = Depends(get_report_export_service),
) -> Response:
    """Render the report as a PDF attachment named after its period."""
    try:
        report = await service.export(filters)
    except ReportGenerationError:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to generate report"
        )
    except RenderFailedError:
        logger.exception("Rendering report for %s failed", filters)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to render report"
        )
    return Response(
        content=report.content,
        media_type=report.media_type,
        headers={"Content-Disposition": f'attachment; filename="{report.filename}"'},
    )
