"""Report Export Service — turns a report into a downloadable document.

Wires the ReportService output (summary + detail rows from one retrieval
pass) into a ReportRenderer, and optionally keeps a copy in a ReportArchive.
"""

import logging

from timeledger.application.interfaces import ReportArchive, ReportRenderer
from timeledger.application.services.report_service import ReportService, build_detail_rows
from timeledger.domain.entities import RenderedReport, ReportFilters
from timeledger.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)


class ReportExportService:
    """Application service producing rendered report documents."""

    def __init__(
        self,
        report_service: ReportService,
        renderer: ReportRenderer,
        user_id: str,
        archive: ReportArchive | None = None,
        currency: str = "USD",
    ):
        self._report_service = report_service
        self._renderer = renderer
        self._user_id = user_id
        self._archive = archive
        self._currency = currency
        self._log = PipelineLogger("ReportExport")

    async def export(self, filters: ReportFilters) -> RenderedReport:
        """Generate, render and (when an archive is configured) store one report.

        Raises:
            ReportGenerationError: If the time entries could not be retrieved.
            RenderFailedError: If the document could not be built or stored.
        """
        self._log.step_start(PipelineStage.PIPELINE, "Exporting report", year=filters.year, month=filters.month)
        summary, entries = await self._report_service.generate_report_with_details(filters)
        rows = build_detail_rows(entries, default_currency=self._currency)

        with self._log.timed_step(PipelineStage.RENDER, "Rendering document", rows=len(rows)):
            report = self._renderer.render(summary, filters, rows)

        if self._archive is not None:
            with self._log.timed_step(PipelineStage.STORE, "Archiving document"):
                path = await self._archive.save_report(report, self._user_id)
            logger.info("Archived %s at %s", report.filename, path)

        self._log.step_complete(
            PipelineStage.PIPELINE, report.filename, pages=report.page_count, size=len(report.content)
        )
        return report
