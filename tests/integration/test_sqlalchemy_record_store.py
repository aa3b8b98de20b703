"""Integration tests for SQLAlchemyRecordStore against a temporary SQLite database."""

from datetime import date, datetime, timezone
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from timeledger.application.services import ReportService
from timeledger.domain.entities import Client, ReportFilters, TimeEntry
from timeledger.domain.exceptions import EntityNotFoundError, InvalidPaginationError
from timeledger.infrastructure.database import Base
from timeledger.infrastructure.database.repositories import SQLAlchemyRecordStore


@pytest_asyncio.fixture
async def session(tmp_path: Path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
    await engine.dispose()


async def _seed(store: SQLAlchemyRecordStore, user_id: str = "user-1") -> tuple[Client, Client]:
    techcorp = await store.create_client(Client(name="TechCorp", hourly_rate=85, user_id=user_id))
    startup = await store.create_client(Client(name="StartupXYZ", hourly_rate=90, user_id=user_id))
    for client, day, hours in [
        (techcorp, date(2024, 1, 15), 8),
        (startup, date(2024, 2, 14), 6),
        (techcorp, date(2024, 1, 20), 4),
    ]:
        await store.create_time_entry(
            TimeEntry(client_id=client.id, date=day, hours=hours, user_id=user_id)
        )
    return techcorp, startup


@pytest.mark.asyncio
async def test_entries_paged_newest_first_with_client_joined(session: AsyncSession):
    store = SQLAlchemyRecordStore(session, "user-1")
    await _seed(store)

    first = await store.fetch_time_entries(page=1, page_size=2)
    second = await store.fetch_time_entries(page=2, page_size=2)

    assert first.total_count == 3
    assert first.has_more and not second.has_more
    dates = [e.date for e in first.items + second.items]
    assert dates == [date(2024, 2, 14), date(2024, 1, 20), date(2024, 1, 15)]
    assert first.items[0].client.name == "StartupXYZ"


@pytest.mark.asyncio
async def test_rows_are_scoped_to_account(session: AsyncSession):
    await _seed(SQLAlchemyRecordStore(session, "user-1"))
    other = SQLAlchemyRecordStore(session, "user-2")

    assert (await other.fetch_time_entries()).total_count == 0
    assert (await other.fetch_clients()).items == []


@pytest.mark.asyncio
async def test_report_over_database(session: AsyncSession):
    store = SQLAlchemyRecordStore(session, "user-1")
    await _seed(store)

    summary = await ReportService(store, page_size=2).generate_report(ReportFilters(year=2024))

    assert summary.total_hours == 18
    assert summary.total_amount == 1560
    assert [c.client_name for c in summary.client_reports] == ["TechCorp", "StartupXYZ"]


@pytest.mark.asyncio
async def test_update_entry_rejoins_new_client(session: AsyncSession):
    store = SQLAlchemyRecordStore(session, "user-1")
    techcorp, startup = await _seed(store)
    entry = (await store.fetch_time_entries(page_size=10)).items[-1]
    assert entry.client_id == techcorp.id

    entry.update(client_id=startup.id, hours=5)
    updated = await store.update_time_entry(entry)

    assert updated.client.name == "StartupXYZ"
    assert updated.amount == 450


@pytest.mark.asyncio
async def test_deactivate_client_keeps_row(session: AsyncSession):
    store = SQLAlchemyRecordStore(session, "user-1")
    techcorp, _ = await _seed(store)

    assert await store.deactivate_client(techcorp.id) is True
    everyone = await store.fetch_clients()
    active = await store.fetch_clients(include_inactive=False)

    assert [c.name for c in everyone.items] == ["StartupXYZ", "TechCorp"]
    assert [c.name for c in active.items] == ["StartupXYZ"]
    assert await store.deactivate_client("missing") is False


@pytest.mark.asyncio
async def test_delete_entry(session: AsyncSession):
    store = SQLAlchemyRecordStore(session, "user-1")
    await _seed(store)
    entry = (await store.fetch_time_entries()).items[0]

    assert await store.delete_time_entry(entry.id) is True
    assert await store.get_time_entry(entry.id) is None
    assert await store.delete_time_entry(entry.id) is False


@pytest.mark.asyncio
async def test_invalid_page_rejected(session: AsyncSession):
    with pytest.raises(InvalidPaginationError):
        await SQLAlchemyRecordStore(session, "user-1").fetch_time_entries(page=0)


@pytest.mark.asyncio
async def test_deactivate_client_refreshes_updated_at(session: AsyncSession):
    store = SQLAlchemyRecordStore(session, "user-1")
    stamp = datetime(2020, 1, 1, tzinfo=timezone.utc)
    client = await store.create_client(
        Client(name="Legacy", hourly_rate=50, user_id="user-1", created_at=stamp, updated_at=stamp)
    )

    assert await store.deactivate_client(client.id) is True
    stored = await store.get_client(client.id)

    assert stored.is_active is False
    assert stored.updated_at.replace(tzinfo=timezone.utc) > stamp


@pytest.mark.asyncio
async def test_update_of_missing_rows_raises_not_found(session: AsyncSession):
    store = SQLAlchemyRecordStore(session, "user-1")
    techcorp, _ = await _seed(store)

    with pytest.raises(EntityNotFoundError):
        await store.update_client(Client(name="Ghost", hourly_rate=1, user_id="user-1"))
    with pytest.raises(EntityNotFoundError):
        await store.update_time_entry(
            TimeEntry(client_id=techcorp.id, date=date(2024, 5, 1), hours=1, user_id="user-1")
        )
