"""Application service (use case) for TimeEntry operations."""

import logging

from timeledger.application.interfaces import RecordStoreGateway
from timeledger.application.schemas.time_entry import TimeEntryCreate, TimeEntryUpdate
from timeledger.domain.entities import Page, TimeEntry
from timeledger.domain.exceptions import EntityNotFoundError

logger = logging.getLogger(__name__)


class TimeEntryService:
    """Orchestrates time entry CRUD logic. Depends on the record store port (DI)."""

    def __init__(self, gateway: RecordStoreGateway, user_id: str):
        self._gateway = gateway
        self._user_id = user_id

    async def _ensure_client(self, client_id: str) -> None:
        if await self._gateway.get_client(client_id) is None:
            raise EntityNotFoundError("Client", client_id)

    async def get_time_entry(self, entry_id: str) -> TimeEntry:
        entry = await self._gateway.get_time_entry(entry_id)
        if entry is None:
            raise EntityNotFoundError("TimeEntry", entry_id)
        return entry

    async def list_time_entries(self, page: int = 1, page_size: int = 10) -> Page[TimeEntry]:
        return await self._gateway.fetch_time_entries(page, page_size)

    async def create_time_entry(self, data: TimeEntryCreate) -> TimeEntry:
        await self._ensure_client(data.client_id)
        entry = TimeEntry(
            client_id=data.client_id,
            date=data.date,
            hours=data.hours,
            description=data.description,
            user_id=self._user_id,
        )
        created = await self._gateway.create_time_entry(entry)
        logger.info("Recorded %.2fh for client %s on %s", created.hours, created.client_id, created.date)
        return created

    async def update_time_entry(self, entry_id: str, data: TimeEntryUpdate) -> TimeEntry:
        entry = await self.get_time_entry(entry_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "client_id" in changes:
            await self._ensure_client(changes["client_id"])
        entry.update(**changes)
        return await self._gateway.update_time_entry(entry)

    async def delete_time_entry(self, entry_id: str) -> None:
        if not await self._gateway.delete_time_entry(entry_id):
            raise EntityNotFoundError("TimeEntry", entry_id)
