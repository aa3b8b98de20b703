"""Report Service — fetches every time entry and rolls it up by month and client.

The record store only offers plain paginated reads, so the service pulls
every page first and applies the year, month and client predicates in
memory. Each call owns its accumulation state; nothing is cached between
calls.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date

from timeledger.application.interfaces import RecordStoreGateway
from timeledger.domain.entities import (
    ClientReport,
    DetailRow,
    MonthlyReport,
    ReportFilters,
    ReportSummary,
    TimeEntry,
)
from timeledger.domain.exceptions import (
    InvalidPaginationError,
    ReportGenerationError,
    RetrievalFailedError,
)
from timeledger.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100
UNKNOWN_CLIENT_NAME = "Unknown Client"


@dataclass
class _Totals:
    hours: float = 0.0
    amount: float = 0.0
    count: int = 0

    def add(self, entry: TimeEntry) -> None:
        self.hours += entry.hours
        self.amount += entry.amount
        self.count += 1


def matches_filters(entry: TimeEntry, filters: ReportFilters) -> bool:
    """Return True when an entry passes the date-range, client and month predicates."""
    in_date_range = filters.start_date <= entry.date < filters.end_date
    in_client_filter = not filters.client_ids or entry.client_id in filters.client_ids
    in_month_filter = filters.month is None or entry.date.month == filters.month
    return in_date_range and in_client_filter and in_month_filter


def filter_entries(entries: Iterable[TimeEntry], filters: ReportFilters) -> list[TimeEntry]:
    return [entry for entry in entries if matches_filters(entry, filters)]


def month_name(year: int, month: int) -> str:
    return date(year, month, 1).strftime("%B")


def summarize_entries(entries: Sequence[TimeEntry], filters: ReportFilters) -> ReportSummary:
    """Aggregate already-filtered entries into a ReportSummary.

    Entries without a joined client count toward the hours total, add
    nothing to the amount, and are left out of the client breakdown.
    """
    totals = _Totals()
    for entry in entries:
        totals.add(entry)

    monthly_reports: list[MonthlyReport] = []
    if filters.month is None:
        by_month = {month: _Totals() for month in range(1, 13)}
        for entry in entries:
            by_month[entry.date.month].add(entry)
        monthly_reports = [
            MonthlyReport(
                month=month,
                month_name=month_name(filters.year, month),
                total_hours=month_totals.hours,
                total_amount=month_totals.amount,
                entries_count=month_totals.count,
            )
            for month, month_totals in by_month.items()
        ]

    by_client: dict[str, _Totals] = {}
    client_names: dict[str, str] = {}
    for entry in entries:
        if entry.client is None:
            continue
        if entry.client_id not in by_client:
            by_client[entry.client_id] = _Totals()
            client_names[entry.client_id] = entry.client.name
        by_client[entry.client_id].add(entry)

    client_reports = [
        ClientReport(
            client_id=client_id,
            client_name=client_names[client_id],
            total_hours=client_totals.hours,
            total_amount=client_totals.amount,
            entries_count=client_totals.count,
        )
        for client_id, client_totals in by_client.items()
    ]
    # sorted() is stable: equal amounts keep first-seen order
    client_reports = sorted(client_reports, key=lambda report: report.total_amount, reverse=True)

    return ReportSummary(
        total_hours=totals.hours,
        total_amount=totals.amount,
        entries_count=totals.count,
        monthly_reports=tuple(monthly_reports),
        client_reports=tuple(client_reports),
    )


def build_detail_rows(entries: Iterable[TimeEntry], default_currency: str = "USD") -> list[DetailRow]:
    """Flatten entries into rows for the line-item table, computing each amount once."""
    rows: list[DetailRow] = []
    for entry in entries:
        client = entry.client
        rows.append(
            DetailRow(
                date=entry.date,
                client_name=client.name if client else UNKNOWN_CLIENT_NAME,
                description=entry.description,
                hours=entry.hours,
                amount=entry.amount,
                currency=client.currency if client else default_currency,
            )
        )
    return rows


class ReportService:
    """Application service computing time reports from the record store."""

    def __init__(self, gateway: RecordStoreGateway, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if page_size < 1:
            raise InvalidPaginationError(1, page_size)
        self._gateway = gateway
        self._page_size = page_size
        self._log = PipelineLogger("ReportService")

    async def fetch_all_time_entries(self) -> list[TimeEntry]:
        """Request successive pages until the store reports no more remain.

        Pages are fetched one at a time because the "more pages" answer is
        only known once the previous page has arrived.

        Raises:
            RetrievalFailedError: If any page request fails.
        """
        entries: list[TimeEntry] = []
        page = 1
        while True:
            try:
                result = await self._gateway.fetch_time_entries(page, self._page_size)
            except Exception as exc:
                raise RetrievalFailedError(page, exc) from exc
            entries.extend(result.items)
            self._log.detail(
                f"Page {page}/{max(result.total_pages, 1)}",
                rows=len(result.items),
                total=result.total_count,
            )
            if not result.has_more:
                break
            page += 1
        return entries

    async def _load_filtered(self, filters: ReportFilters) -> list[TimeEntry]:
        with self._log.timed_step(
            PipelineStage.FETCH, "Fetching time entries", backend=self._gateway.backend_name
        ):
            entries = await self.fetch_all_time_entries()
        with self._log.timed_step(
            PipelineStage.FILTER, "Filtering entries", year=filters.year, month=filters.month
        ):
            filtered = filter_entries(entries, filters)
        self._log.stats(fetched=len(entries), matched=len(filtered))
        return filtered

    async def generate_report(self, filters: ReportFilters) -> ReportSummary:
        """Return the complete summary for the filters, or raise; never a partial one.

        Raises:
            ReportGenerationError: If the time entries could not be retrieved.
        """
        try:
            entries = await self._load_filtered(filters)
        except RetrievalFailedError as exc:
            logger.error("Report generation failed for %s: %s", filters, exc)
            raise ReportGenerationError("Failed to generate report") from exc

        with self._log.timed_step(PipelineStage.AGGREGATE, "Aggregating report"):
            summary = summarize_entries(entries, filters)
        return summary

    async def get_detailed_entries(self, filters: ReportFilters) -> list[TimeEntry]:
        """Return the filtered entries in store order; callers sort if they need to.

        Raises:
            ReportGenerationError: If the time entries could not be retrieved.
        """
        try:
            return await self._load_filtered(filters)
        except RetrievalFailedError as exc:
            logger.error("Fetching detailed entries failed for %s: %s", filters, exc)
            raise ReportGenerationError("Failed to fetch detailed entries") from exc

    async def generate_report_with_details(
        self, filters: ReportFilters
    ) -> tuple[ReportSummary, list[TimeEntry]]:
        """Summary plus detail entries from a single retrieval pass."""
        try:
            entries = await self._load_filtered(filters)
        except RetrievalFailedError as exc:
            logger.error("Report generation failed for %s: %s", filters, exc)
            raise ReportGenerationError("Failed to generate report") from exc

        with self._log.timed_step(PipelineStage.AGGREGATE, "Aggregating report"):
            summary = summarize_entries(entries, filters)
        return summary, entries
