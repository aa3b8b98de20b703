"""Unit tests for the PdfReportRenderer."""

from datetime import date

import pytest
from reportlab.platypus import Paragraph

from timeledger.domain.entities import (
    ClientReport,
    DetailRow,
    MonthlyReport,
    ReportFilters,
    ReportSummary,
)
from timeledger.domain.exceptions import RenderFailedError
from timeledger.infrastructure.reports.pdf_report_renderer import (
    PdfReportRenderer,
    client_rows,
    detail_rows,
    monthly_rows,
    show_client_breakdown,
    show_monthly_breakdown,
    summary_rows,
)


# ── Helpers ──


def _months(**hours_by_month: float) -> tuple[MonthlyReport, ...]:
    names = ["January", "February", "March", "April", "May", "June", "July",
             "August", "September", "October", "November", "December"]
    reports = []
    for month, name in enumerate(names, start=1):
        hours = hours_by_month.get(name.lower(), 0)
        reports.append(MonthlyReport(month, name, hours, hours * 85, 1 if hours else 0))
    return tuple(reports)


def _summary(clients: int = 2, monthly: tuple[MonthlyReport, ...] = ()) -> ReportSummary:
    client_reports = (
        ClientReport("tc", "TechCorp", 12, 1020, 2),
        ClientReport("sx", "StartupXYZ", 6, 540, 1),
    )[:clients]
    return ReportSummary(
        total_hours=18,
        total_amount=1560,
        entries_count=3,
        monthly_reports=monthly,
        client_reports=client_reports,
    )


ROWS = [
    DetailRow(date(2024, 1, 15), "TechCorp", "API work", 8, 680),
    DetailRow(date(2024, 2, 14), "StartupXYZ", "Design review", 6, 540),
    DetailRow(date(2024, 1, 20), "TechCorp", "Bug fixes & QA", 4, 340),
]


def _headings(story: list) -> list[str]:
    return [f.getPlainText() for f in story if isinstance(f, Paragraph)]


@pytest.fixture
def renderer() -> PdfReportRenderer:
    return PdfReportRenderer(today=lambda: date(2024, 3, 5), compress=False)


# ── Layout ──


def test_title_block(renderer: PdfReportRenderer):
    story = renderer.build_story(_summary(), ReportFilters(year=2024), ROWS)
    texts = _headings(story)
    assert texts[:3] == [
        "Time Tracking Report",
        "Report Period: 2024",
        "Generated: March 5, 2024",
    ]


def test_monthly_report_period_names_the_month(renderer: PdfReportRenderer):
    story = renderer.build_story(_summary(), ReportFilters(year=2024, month=6), ROWS)
    assert "Report Period: June 2024" in _headings(story)


def test_single_client_omits_client_breakdown(renderer: PdfReportRenderer):
    story = renderer.build_story(_summary(clients=1), ReportFilters(year=2024), ROWS)
    assert "Client Breakdown" not in _headings(story)
    assert not show_client_breakdown(_summary(clients=1))


def test_several_clients_show_client_breakdown(renderer: PdfReportRenderer):
    story = renderer.build_story(_summary(clients=2), ReportFilters(year=2024), ROWS)
    assert "Client Breakdown" in _headings(story)


def test_month_filter_omits_monthly_breakdown(renderer: PdfReportRenderer):
    filters = ReportFilters(year=2024, month=6)
    story = renderer.build_story(_summary(monthly=_months(june=4)), filters, ROWS)
    assert "Monthly Breakdown" not in _headings(story)
    assert not show_monthly_breakdown(_summary(monthly=_months(june=4)), filters)


def test_monthly_breakdown_lists_only_active_months():
    summary = _summary(monthly=_months(january=12, february=6))
    assert show_monthly_breakdown(summary, ReportFilters(year=2024))
    assert [row[0] for row in monthly_rows(summary, "USD")] == ["January", "February"]
    assert not show_monthly_breakdown(_summary(monthly=_months()), ReportFilters(year=2024))


def test_summary_rows_describe_client_selection():
    everyone = summary_rows(_summary(), ReportFilters(year=2024), "USD")
    assert everyone == [
        ["Total Hours", "18"],
        ["Total Amount", "$1,560.00"],
        ["Number of Entries", "3"],
        ["Clients", "All Clients"],
    ]
    selected = summary_rows(_summary(), ReportFilters.build(year=2024, client_ids=["tc", "sx"]), "USD")
    assert selected[-1] == ["Clients", "2 Selected"]


def test_client_rows_use_configured_currency():
    assert client_rows(_summary(), "EUR")[0] == ["TechCorp", "12", "€1,020.00", "2"]


def test_detail_rows_sorted_newest_first():
    rows = detail_rows(ROWS)
    assert [row[0] for row in rows] == ["Feb 14, 2024", "Jan 20, 2024", "Jan 15, 2024"]
    assert rows[0][4] == "$540.00"


def test_detail_section_starts_on_new_page(renderer: PdfReportRenderer):
    story = renderer.build_story(_summary(), ReportFilters(year=2024), ROWS)
    names = [type(f).__name__ for f in story]
    page_break = names.index("PageBreak")
    assert "Detailed Time Entries" in _headings(story[page_break:])
    assert "Summary" in _headings(story[:page_break])


# ── Rendering ──


def test_render_produces_pdf_named_after_period(renderer: PdfReportRenderer):
    report = renderer.render(_summary(clients=1), ReportFilters(year=2024, month=6), ROWS)

    assert report.filename == "time-report-2024-06.pdf"
    assert report.media_type == "application/pdf"
    assert report.content.startswith(b"%PDF")
    assert report.page_count == 2


def test_yearly_filename(renderer: PdfReportRenderer):
    report = renderer.render(_summary(), ReportFilters(year=2024), ROWS)
    assert report.filename == "time-report-2024.pdf"


def test_page_numbers_stamped_on_detail_pages_only(renderer: PdfReportRenderer):
    report = renderer.render(_summary(), ReportFilters(year=2024), ROWS)
    assert b"Page 2 of 2" in report.content
    assert b"Page 1 of 2" not in report.content


def test_long_detail_section_spans_pages(renderer: PdfReportRenderer):
    rows = [
        DetailRow(date(2024, 1, 1 + i % 28), "TechCorp", f"Task {i}", 1, 85)
        for i in range(120)
    ]
    report = renderer.render(_summary(), ReportFilters(year=2024), rows)
    total = report.page_count
    assert total > 2
    assert f"Page {total} of {total}".encode() in report.content


def test_render_with_no_entries(renderer: PdfReportRenderer):
    empty = ReportSummary(0, 0, 0, _months(), ())
    report = renderer.render(empty, ReportFilters(year=2023), [])
    assert report.content.startswith(b"%PDF")
    assert report.page_count == 2


def test_render_is_deterministic(renderer: PdfReportRenderer):
    first = renderer.render(_summary(), ReportFilters(year=2024), ROWS)
    second = renderer.render(_summary(), ReportFilters(year=2024), ROWS)
    assert first.content == second.content


def test_render_failure_raises_render_failed(renderer: PdfReportRenderer):
    broken = [DetailRow(date(2024, 1, 1), "TechCorp", "x", 1, "not a number")]
    with pytest.raises(RenderFailedError):
        renderer.render(_summary(), ReportFilters(year=2024), broken)
