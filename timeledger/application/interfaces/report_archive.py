"""Abstract report archive interface — port for keeping copies of exported reports."""

from abc import ABC, abstractmethod
from pathlib import Path

from timeledger.domain.entities import RenderedReport


class ReportArchive(ABC):
    """Port — persists rendered documents for one account."""

    @abstractmethod
    async def save_report(self, report: RenderedReport, user_id: str) -> Path:
        """Store the document whole or not at all.

        Raises:
            RenderFailedError: If the document could not be written.
        """
        ...
