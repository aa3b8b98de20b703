"""Domain value objects for time reports — computed per request, never persisted."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from timeledger.domain.exceptions import InvalidReportFiltersError


@dataclass(frozen=True)
class ReportFilters:
    """Selection criteria for a report.

    An empty ``client_ids`` set means every client; ``month=None`` means the
    whole calendar year.
    """

    year: int
    month: int | None = None
    client_ids: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not 1 <= self.year < 9999:
            raise InvalidReportFiltersError(f"year must be between 1 and 9998, got {self.year}")
        if self.month is not None and not 1 <= self.month <= 12:
            raise InvalidReportFiltersError(f"month must be between 1 and 12, got {self.month}")
        if not isinstance(self.client_ids, frozenset):
            object.__setattr__(self, "client_ids", frozenset(self.client_ids))

    @classmethod
    def build(
        cls, year: int, month: int | None = None, client_ids: Iterable[str] = ()
    ) -> "ReportFilters":
        return cls(year=year, month=month, client_ids=frozenset(client_ids))

    @property
    def start_date(self) -> date:
        return date(self.year, 1, 1)

    @property
    def end_date(self) -> date:
        """Exclusive upper bound of the reporting year."""
        return date(self.year + 1, 1, 1)


@dataclass(frozen=True)
class MonthlyReport:
    month: int
    month_name: str
    total_hours: float
    total_amount: float
    entries_count: int


@dataclass(frozen=True)
class ClientReport:
    client_id: str
    client_name: str
    total_hours: float
    total_amount: float
    entries_count: int


@dataclass(frozen=True)
class ReportSummary:
    """Top-level rollup for one reporting period."""

    total_hours: float
    total_amount: float
    entries_count: int
    monthly_reports: tuple[MonthlyReport, ...] = ()
    client_reports: tuple[ClientReport, ...] = ()


@dataclass(frozen=True)
class DetailRow:
    """One flattened entry-plus-client line for the detail table."""

    date: date
    client_name: str
    description: str
    hours: float
    amount: float
    currency: str = "USD"


@dataclass(frozen=True)
class RenderedReport:
    """A fully built report document."""

    filename: str
    content: bytes
    page_count: int
    media_type: str = "application/pdf"
