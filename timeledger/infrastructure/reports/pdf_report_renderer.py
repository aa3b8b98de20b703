"""PDF report renderer — implements the ReportRenderer interface with reportlab.

Document layout, in order:
    1. Title block (title, report period, generation date)
    2. Summary table (Metric / Value)
    3. Client Breakdown — only when more than one client has hours
    4. Monthly Breakdown — only for yearly reports with at least one active month
    5. Page break, then Detailed Time Entries, newest first, with
       "Page X of Y" stamped on every page of that section
"""

import io
import logging
from collections.abc import Callable, Sequence
from datetime import date
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import (
    Flowable,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from timeledger.application.interfaces import ReportRenderer
from timeledger.domain.entities import (
    DetailRow,
    RenderedReport,
    ReportFilters,
    ReportSummary,
)
from timeledger.domain.exceptions import RenderFailedError
from timeledger.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

from .formatting import (
    DEFAULT_CURRENCY,
    format_currency,
    format_date,
    format_hours,
    format_long_date,
    period_label,
    report_filename,
)

logger = logging.getLogger(__name__)

REPORT_TITLE = "Time Tracking Report"

PRIMARY_COLOR = colors.Color(139 / 255, 92 / 255, 246 / 255)
GRAY_COLOR = colors.Color(107 / 255, 114 / 255, 128 / 255)
LIGHT_GRAY_COLOR = colors.Color(243 / 255, 244 / 255, 246 / 255)

SUMMARY_HEADER = ["Metric", "Value"]
CLIENT_HEADER = ["Client", "Hours", "Amount", "Entries"]
MONTHLY_HEADER = ["Month", "Hours", "Amount", "Entries"]
DETAIL_HEADER = ["Date", "Client", "Description", "Hours", "Amount"]

_MARGIN = 20 * mm


# ── Table data ───────────────────────────────────────────────────────


def summary_rows(summary: ReportSummary, filters: ReportFilters, currency: str) -> list[list[str]]:
    clients = "All Clients" if not filters.client_ids else f"{len(filters.client_ids)} Selected"
    return [
        ["Total Hours", format_hours(summary.total_hours)],
        ["Total Amount", format_currency(summary.total_amount, currency)],
        ["Number of Entries", str(summary.entries_count)],
        ["Clients", clients],
    ]


def client_rows(summary: ReportSummary, currency: str) -> list[list[str]]:
    return [
        [
            report.client_name,
            format_hours(report.total_hours),
            format_currency(report.total_amount, currency),
            str(report.entries_count),
        ]
        for report in summary.client_reports
    ]


def monthly_rows(summary: ReportSummary, currency: str) -> list[list[str]]:
    """Rows for months that have hours, in calendar order."""
    return [
        [
            report.month_name,
            format_hours(report.total_hours),
            format_currency(report.total_amount, currency),
            str(report.entries_count),
        ]
        for report in sorted(summary.monthly_reports, key=lambda r: r.month)
        if report.total_hours > 0
    ]


def sort_detail_rows(rows: Sequence[DetailRow]) -> list[DetailRow]:
    """Newest first; rows sharing a date keep their incoming order."""
    return sorted(rows, key=lambda row: row.date, reverse=True)


def detail_rows(rows: Sequence[DetailRow]) -> list[list[str]]:
    return [
        [
            format_date(row.date),
            row.client_name,
            row.description,
            format_hours(row.hours),
            format_currency(row.amount, row.currency),
        ]
        for row in sort_detail_rows(rows)
    ]


def show_client_breakdown(summary: ReportSummary) -> bool:
    return len(summary.client_reports) > 1


def show_monthly_breakdown(summary: ReportSummary, filters: ReportFilters) -> bool:
    return filters.month is None and any(r.total_hours > 0 for r in summary.monthly_reports)


# ── Canvas helpers ───────────────────────────────────────────────────


class _StartPageNumbering(Flowable):
    """Zero-size marker: page numbers are stamped from the page it lands on."""

    def wrap(self, availWidth, availHeight):
        return 0, 0

    def draw(self):
        self.canv.numbering_from_page = self.canv.getPageNumber()


class _NumberedCanvas(canvas.Canvas):
    """Canvas that defers page output until the total page count is known."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states: list[dict] = []
        self.numbering_from_page: int | None = None

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        numbering_from = self.numbering_from_page
        total_pages = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            page_number = self.getPageNumber()
            if numbering_from is not None and page_number >= numbering_from:
                self._draw_page_number(page_number, total_pages)
            super().showPage()
        super().save()

    def _draw_page_number(self, page_number: int, total_pages: int) -> None:
        width, _ = self._pagesize
        self.saveState()
        self.setFont("Helvetica", 8)
        self.setFillColor(GRAY_COLOR)
        self.drawRightString(width - _MARGIN, 10 * mm, f"Page {page_number} of {total_pages}")
        self.restoreState()


# ── Renderer ─────────────────────────────────────────────────────────


class PdfReportRenderer(ReportRenderer):
    """Infrastructure adapter — builds the report PDF in memory."""

    def __init__(
        self,
        currency: str = DEFAULT_CURRENCY,
        *,
        today: Callable[[], date] = date.today,
        compress: bool = True,
    ):
        self._currency = currency
        self._today = today
        self._compress = compress
        self._log = PipelineLogger("PdfReportRenderer")
        self._styles = self._build_styles()

    @staticmethod
    def _build_styles() -> dict[str, ParagraphStyle]:
        base = getSampleStyleSheet()
        return {
            "title": ParagraphStyle(
                "ReportTitle", parent=base["Title"], fontSize=24, leading=28,
                alignment=0, textColor=PRIMARY_COLOR, spaceAfter=4,
            ),
            "meta": ParagraphStyle(
                "ReportMeta", parent=base["Normal"], fontSize=12, leading=16,
                textColor=GRAY_COLOR,
            ),
            "heading": ParagraphStyle(
                "ReportHeading", parent=base["Heading2"], fontSize=16, leading=20,
                textColor=colors.black, spaceBefore=12, spaceAfter=6,
            ),
            "cell": ParagraphStyle(
                "ReportCell", parent=base["Normal"], fontSize=9, leading=11,
            ),
            "cell_right": ParagraphStyle(
                "ReportCellRight", parent=base["Normal"], fontSize=9, leading=11,
                alignment=TA_RIGHT,
            ),
        }

    @staticmethod
    def _table_style(header_font_size: int, body_font_size: int, body_rows: int = 1) -> list[tuple]:
        style = [
            ("BACKGROUND", (0, 0), (-1, 0), PRIMARY_COLOR),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, 0), header_font_size),
            ("GRID", (0, 0), (-1, -1), 0.5, GRAY_COLOR),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("BOTTOMPADDING", (0, 0), (-1, 0), 6),
        ]
        if body_rows:
            style.append(("FONTSIZE", (0, 1), (-1, -1), body_font_size))
        return style

    def _breakdown_table(self, header: list[str], rows: list[list[str]], first_col: float) -> Table:
        table = Table(
            [header, *rows],
            colWidths=[first_col, 30 * mm, 40 * mm, 30 * mm],
            hAlign="LEFT",
            repeatRows=1,
        )
        table.setStyle(TableStyle(self._table_style(11, 10, body_rows=len(rows)) + [
            ("ALIGN", (1, 0), (1, -1), "CENTER"),
            ("ALIGN", (2, 0), (2, -1), "RIGHT"),
            ("ALIGN", (3, 0), (3, -1), "CENTER"),
        ]))
        return table

    def build_story(
        self,
        summary: ReportSummary,
        filters: ReportFilters,
        rows: Sequence[DetailRow],
    ) -> list[Flowable]:
        """Assemble every flowable of the document, in layout order."""
        styles = self._styles
        story: list[Flowable] = [
            Paragraph(REPORT_TITLE, styles["title"]),
            Paragraph(f"Report Period: {period_label(filters)}", styles["meta"]),
            Paragraph(f"Generated: {format_long_date(self._today())}", styles["meta"]),
            Spacer(1, 8 * mm),
            Paragraph("Summary", styles["heading"]),
        ]

        summary_table = Table(
            [SUMMARY_HEADER, *summary_rows(summary, filters, self._currency)],
            colWidths=[60 * mm, 60 * mm],
            hAlign="LEFT",
        )
        summary_table.setStyle(TableStyle(self._table_style(11, 10) + [
            ("FONTNAME", (0, 1), (0, -1), "Helvetica-Bold"),
        ]))
        story.append(summary_table)

        if show_client_breakdown(summary):
            story.append(Paragraph("Client Breakdown", styles["heading"]))
            story.append(self._breakdown_table(
                CLIENT_HEADER, client_rows(summary, self._currency), 70 * mm
            ))

        if show_monthly_breakdown(summary, filters):
            story.append(Paragraph("Monthly Breakdown", styles["heading"]))
            story.append(self._breakdown_table(
                MONTHLY_HEADER, monthly_rows(summary, self._currency), 50 * mm
            ))

        story.append(PageBreak())
        story.append(_StartPageNumbering())
        story.append(Paragraph("Detailed Time Entries", styles["heading"]))

        # Client and description wrap inside their columns
        table_data: list[list] = [DETAIL_HEADER]
        for date_text, client, description, hours, amount in detail_rows(rows):
            table_data.append([
                date_text,
                Paragraph(escape(client), styles["cell"]),
                Paragraph(escape(description), styles["cell"]),
                hours,
                Paragraph(escape(amount), styles["cell_right"]),
            ])
        detail_table = Table(
            table_data,
            colWidths=[25 * mm, 35 * mm, 65 * mm, 20 * mm, 25 * mm],
            hAlign="LEFT",
            repeatRows=1,
        )
        detail_style = self._table_style(10, 9, body_rows=len(table_data) - 1) + [
            ("ALIGN", (0, 0), (0, -1), "CENTER"),
            ("ALIGN", (3, 0), (3, -1), "CENTER"),
            ("ALIGN", (4, 0), (4, 0), "RIGHT"),
        ]
        if len(table_data) > 1:
            detail_style.append(
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, LIGHT_GRAY_COLOR])
            )
        detail_table.setStyle(TableStyle(detail_style))
        story.append(detail_table)
        return story

    def render(
        self,
        summary: ReportSummary,
        filters: ReportFilters,
        detail_rows: Sequence[DetailRow],
    ) -> RenderedReport:
        filename = report_filename(filters)
        buffer = io.BytesIO()
        try:
            with self._log.timed_step(PipelineStage.RENDER, f"Rendering {filename}", rows=len(detail_rows)):
                doc = SimpleDocTemplate(
                    buffer,
                    pagesize=A4,
                    leftMargin=_MARGIN,
                    rightMargin=_MARGIN,
                    topMargin=_MARGIN,
                    bottomMargin=_MARGIN,
                    title=REPORT_TITLE,
                    invariant=True,
                    pageCompression=1 if self._compress else 0,
                )
                doc.build(
                    self.build_story(summary, filters, detail_rows),
                    canvasmaker=_NumberedCanvas,
                )
        except Exception as exc:
            raise RenderFailedError(f"Could not render {filename}: {exc}") from exc

        content = buffer.getvalue()
        self._log.stats(file=filename, pages=doc.page, bytes=len(content))
        return RenderedReport(filename=filename, content=content, page_count=doc.page)
