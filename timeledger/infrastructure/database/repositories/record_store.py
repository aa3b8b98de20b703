"""Concrete record store gateway backed by SQLAlchemy async sessions."""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from timeledger.application.interfaces import RecordStoreGateway, check_pagination
from timeledger.domain.entities import Client, Page, TimeEntry
from timeledger.domain.exceptions import EntityNotFoundError, RecordStoreError
from timeledger.infrastructure.database.models import ClientModel, TimeEntryModel

logger = logging.getLogger(__name__)


class SQLAlchemyRecordStore(RecordStoreGateway):
    """Implements the RecordStoreGateway port for one account's rows."""

    def __init__(self, session: AsyncSession, user_id: str):
        self._session = session
        self._user_id = user_id

    @property
    def backend_name(self) -> str:
        return "database"

    # ── Mapping ─────────────────────────────────────────────────────

    @staticmethod
    def _client_to_entity(model: ClientModel) -> Client:
        """Map ORM model → domain entity."""
        return Client(
            id=model.id,
            user_id=model.user_id,
            name=model.name,
            hourly_rate=model.hourly_rate,
            currency=model.currency,
            email=model.email,
            address=model.address,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _entry_to_entity(self, model: TimeEntryModel) -> TimeEntry:
        return TimeEntry(
            id=model.id,
            user_id=model.user_id,
            client_id=model.client_id,
            date=model.date,
            hours=model.hours,
            description=model.description,
            client=self._client_to_entity(model.client) if model.client else None,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    # ── Time entries ────────────────────────────────────────────────

    async def fetch_time_entries(self, page: int = 1, page_size: int = 10) -> Page[TimeEntry]:
        check_pagination(page, page_size)
        count_stmt = (
            select(func.count())
            .select_from(TimeEntryModel)
            .where(TimeEntryModel.user_id == self._user_id)
        )
        stmt = (
            select(TimeEntryModel)
            .options(selectinload(TimeEntryModel.client))
            .where(TimeEntryModel.user_id == self._user_id)
            .order_by(TimeEntryModel.date.desc(), TimeEntryModel.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        try:
            total = (await self._session.execute(count_stmt)).scalar_one()
            result = await self._session.execute(stmt)
            rows = result.scalars().all()
        except SQLAlchemyError as exc:
            raise RecordStoreError(self.backend_name, str(exc)) from exc

        logger.debug(
            "Fetched time entry page %d (%d rows of %d total)", page, len(rows), total
        )
        return Page(
            items=[self._entry_to_entity(row) for row in rows],
            total_count=total,
            page=page,
            page_size=page_size,
        )

    async def _get_entry_model(self, entry_id: str) -> TimeEntryModel | None:
        stmt = (
            select(TimeEntryModel)
            .options(selectinload(TimeEntryModel.client))
            .where(TimeEntryModel.id == entry_id, TimeEntryModel.user_id == self._user_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_time_entry(self, entry_id: str) -> TimeEntry | None:
        model = await self._get_entry_model(entry_id)
        return self._entry_to_entity(model) if model else None

    async def create_time_entry(self, entry: TimeEntry) -> TimeEntry:
        model = TimeEntryModel(
            id=entry.id,
            user_id=self._user_id,
            client_id=entry.client_id,
            date=entry.date,
            hours=entry.hours,
            description=entry.description,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        created = await self._get_entry_model(entry.id)
        return self._entry_to_entity(created)

    async def update_time_entry(self, entry: TimeEntry) -> TimeEntry:
        model = await self._get_entry_model(entry.id)
        if model is None:
            raise EntityNotFoundError("TimeEntry", entry.id)
        model.client_id = entry.client_id
        model.date = entry.date
        model.hours = entry.hours
        model.description = entry.description
        model.updated_at = entry.updated_at
        await self._session.flush()
        # Re-select so a changed client_id comes back with its new client joined
        refreshed = await self._get_entry_model(entry.id)
        return self._entry_to_entity(refreshed)

    async def delete_time_entry(self, entry_id: str) -> bool:
        model = await self._get_entry_model(entry_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True

    # ── Clients ─────────────────────────────────────────────────────

    async def fetch_clients(
        self, page: int = 1, page_size: int = 100, *, include_inactive: bool = True
    ) -> Page[Client]:
        check_pagination(page, page_size)
        conditions = [ClientModel.user_id == self._user_id]
        if not include_inactive:
            conditions.append(ClientModel.is_active.is_(True))

        count_stmt = select(func.count()).select_from(ClientModel).where(*conditions)
        stmt = (
            select(ClientModel)
            .where(*conditions)
            .order_by(ClientModel.name)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        try:
            total = (await self._session.execute(count_stmt)).scalar_one()
            result = await self._session.execute(stmt)
            rows = result.scalars().all()
        except SQLAlchemyError as exc:
            raise RecordStoreError(self.backend_name, str(exc)) from exc

        return Page(
            items=[self._client_to_entity(row) for row in rows],
            total_count=total,
            page=page,
            page_size=page_size,
        )

    async def _get_client_model(self, client_id: str) -> ClientModel | None:
        stmt = select(ClientModel).where(
            ClientModel.id == client_id, ClientModel.user_id == self._user_id
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_client(self, client_id: str) -> Client | None:
        model = await self._get_client_model(client_id)
        return self._client_to_entity(model) if model else None

    async def create_client(self, client: Client) -> Client:
        model = ClientModel(
            id=client.id,
            user_id=self._user_id,
            name=client.name,
            hourly_rate=client.hourly_rate,
            currency=client.currency,
            email=client.email,
            address=client.address,
            is_active=client.is_active,
            created_at=client.created_at,
            updated_at=client.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._client_to_entity(model)

    async def update_client(self, client: Client) -> Client:
        model = await self._get_client_model(client.id)
        if model is None:
            raise EntityNotFoundError("Client", client.id)
        model.name = client.name
        model.hourly_rate = client.hourly_rate
        model.currency = client.currency
        model.email = client.email
        model.address = client.address
        model.is_active = client.is_active
        model.updated_at = client.updated_at
        await self._session.flush()
        return self._client_to_entity(model)

    async def deactivate_client(self, client_id: str) -> bool:
        model = await self._get_client_model(client_id)
        if model is None:
            return False
        client = self._client_to_entity(model)
        client.deactivate()
        model.is_active = client.is_active
        model.updated_at = client.updated_at
        await self._session.flush()
        return True
