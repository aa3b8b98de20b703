"""Abstract report renderer interface — port for document generators."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from timeledger.domain.entities import DetailRow, RenderedReport, ReportFilters, ReportSummary


class ReportRenderer(ABC):
    """Port — turns a report summary and its detail rows into a document."""

    @abstractmethod
    def render(
        self,
        summary: ReportSummary,
        filters: ReportFilters,
        detail_rows: Sequence[DetailRow],
    ) -> RenderedReport:
        """Build the complete document in memory.

        Raises:
            RenderFailedError: If any part of the document cannot be built.
        """
        ...
