"""Abstract gateway interface (port) for Client and TimeEntry persistence.

Every gateway instance is bound to one account: all reads and writes are
implicitly filtered to the rows that account owns.
"""

from abc import ABC, abstractmethod

from timeledger.domain.entities import Client, Page, TimeEntry
from timeledger.domain.exceptions import InvalidPaginationError


def check_pagination(page: int, page_size: int) -> None:
    """Reject page numbers and sizes below 1 instead of computing a negative offset."""
    if page < 1 or page_size < 1:
        raise InvalidPaginationError(page, page_size)


class RecordStoreGateway(ABC):
    """Port for the paginated record store — implemented in the infrastructure layer."""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Short name of the backing store (e.g. 'database', 'hosted')."""
        ...

    # ── Time entries ────────────────────────────────────────────────

    @abstractmethod
    async def fetch_time_entries(self, page: int = 1, page_size: int = 10) -> Page[TimeEntry]:
        """Return one page of time entries joined with their client.

        Ordered by date descending, then created_at descending.

        Raises:
            InvalidPaginationError: If page or page_size is below 1.
            RecordStoreError: If the store cannot serve the page.
        """
        ...

    @abstractmethod
    async def get_time_entry(self, entry_id: str) -> TimeEntry | None:
        ...

    @abstractmethod
    async def create_time_entry(self, entry: TimeEntry) -> TimeEntry:
        """Persist a new entry and return it joined with its client."""
        ...

    @abstractmethod
    async def update_time_entry(self, entry: TimeEntry) -> TimeEntry:
        ...

    @abstractmethod
    async def delete_time_entry(self, entry_id: str) -> bool:
        """Delete an entry. Returns True if deleted, False if not found."""
        ...

    # ── Clients ─────────────────────────────────────────────────────

    @abstractmethod
    async def fetch_clients(
        self, page: int = 1, page_size: int = 100, *, include_inactive: bool = True
    ) -> Page[Client]:
        """Return one page of clients ordered by name."""
        ...

    @abstractmethod
    async def get_client(self, client_id: str) -> Client | None:
        ...

    @abstractmethod
    async def create_client(self, client: Client) -> Client:
        ...

    @abstractmethod
    async def update_client(self, client: Client) -> Client:
        ...

    @abstractmethod
    async def deactivate_client(self, client_id: str) -> bool:
        """Soft-delete a client. Returns True if found, False otherwise."""
        ...
