"""Seed a demo account with clients and two months of time entries.

Usage:
    python scripts/seed_demo_data.py --user-id demo
    python scripts/seed_demo_data.py --user-id demo --entries 60 --seed 7

Writes through the configured record store (RECORD_STORE_BACKEND), so the
same script fills the local database or the hosted data API. Re-running
keeps existing clients and only replaces the entries when fewer than
``--min-existing`` are present.
"""

import argparse
import asyncio
import logging
import random
from calendar import monthrange
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from datetime import date

from timeledger.config import get_settings
from timeledger.application.interfaces import RecordStoreGateway
from timeledger.domain.entities import Client, TimeEntry
from timeledger.infrastructure.database import Base, engine, session_scope
from timeledger.infrastructure.database.repositories import SQLAlchemyRecordStore
from timeledger.infrastructure.hosted_store import HostedRecordStore
from timeledger.infrastructure.logging.log_config import setup_logging

logger = logging.getLogger("seed_demo_data")

DEMO_CLIENTS = [
    {
        "name": "TechCorp Solutions",
        "email": "contact@techcorp.com",
        "hourly_rate": 85,
        "address": "123 Tech Street, San Francisco, CA 94105",
    },
    {
        "name": "StartupXYZ",
        "email": "hello@startupxyz.com",
        "hourly_rate": 95,
        "address": "456 Innovation Ave, Austin, TX 73301",
    },
    {
        "name": "Marketing Plus",
        "email": "info@marketingplus.com",
        "hourly_rate": 75,
        "address": "789 Brand Blvd, New York, NY 10001",
    },
    {
        "name": "E-commerce Hub",
        "email": "support@ecommercehub.com",
        "hourly_rate": 90,
        "address": "321 Commerce Lane, Seattle, WA 98101",
    },
]

DESCRIPTIONS = [
    "Frontend development - React components",
    "Backend API development",
    "Database optimization and queries",
    "Bug fixes and testing",
    "Code review and documentation",
    "Client meeting and project planning",
    "UI/UX design implementation",
    "Performance optimization",
    "Security audit and fixes",
    "Third-party API integration",
    "Unit testing and test coverage",
    "Deploy to production environment",
    "Debugging production issues",
    "Data migration scripts",
    "Setting up CI/CD pipeline",
    "Technical documentation writing",
    "Architecture planning meeting",
    "Database schema design",
]

# 0.5 to 8.5 hours in half-hour steps
HOUR_CHOICES = [step / 2 for step in range(1, 18)]


def demo_dates(today: date, rng: random.Random, per_month: int = 20) -> list[date]:
    """Random days in the previous month and in the current month up to today."""
    if today.month == 1:
        prev_year, prev_month = today.year - 1, 12
    else:
        prev_year, prev_month = today.year, today.month - 1

    days_in_prev = monthrange(prev_year, prev_month)[1]
    dates = [date(prev_year, prev_month, rng.randint(1, days_in_prev)) for _ in range(per_month)]
    last_day = min(today.day, 28)
    dates += [date(today.year, today.month, rng.randint(1, last_day)) for _ in range(per_month)]
    return sorted(dates, reverse=True)


async def _all_clients(gateway: RecordStoreGateway) -> list[Client]:
    clients: list[Client] = []
    page = 1
    while True:
        result = await gateway.fetch_clients(page, 100)
        clients.extend(result.items)
        if not result.has_more:
            return clients
        page += 1


async def _all_entries(gateway: RecordStoreGateway) -> list[TimeEntry]:
    entries: list[TimeEntry] = []
    page = 1
    while True:
        result = await gateway.fetch_time_entries(page, 100)
        entries.extend(result.items)
        if not result.has_more:
            return entries
        page += 1


async def seed(
    gateway: RecordStoreGateway,
    user_id: str,
    *,
    entries: int = 40,
    min_existing: int = 30,
    rng: random.Random | None = None,
    today: date | None = None,
) -> None:
    rng = rng or random.Random()
    today = today or date.today()

    clients = await _all_clients(gateway)
    if clients:
        logger.info("Demo clients already exist (%d), reusing them", len(clients))
    else:
        for data in DEMO_CLIENTS:
            clients.append(await gateway.create_client(Client(user_id=user_id, currency="USD", **data)))
        logger.info("Created %d demo clients", len(clients))

    existing = await _all_entries(gateway)
    if len(existing) >= min_existing:
        logger.info("Demo time entries already exist (%d found)", len(existing))
        return
    for entry in existing:
        await gateway.delete_time_entry(entry.id)

    dates = demo_dates(today, rng)
    for _ in range(entries):
        await gateway.create_time_entry(
            TimeEntry(
                client_id=rng.choice(clients).id,
                date=rng.choice(dates),
                hours=rng.choice(HOUR_CHOICES),
                description=rng.choice(DESCRIPTIONS),
                user_id=user_id,
            )
        )
    logger.info("Created %d demo time entries", entries)


@asynccontextmanager
async def _open_gateway(user_id: str) -> AsyncIterator[RecordStoreGateway]:
    settings = get_settings()
    if settings.record_store_backend == "hosted":
        yield HostedRecordStore(
            base_url=settings.hosted_store_url,
            api_key=settings.hosted_store_api_key,
            user_id=user_id,
            timeout=settings.hosted_store_timeout,
        )
        return

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with session_scope() as session:
        yield SQLAlchemyRecordStore(session, user_id)
    await engine.dispose()


async def main() -> None:
    parser = argparse.ArgumentParser(description="Seed demo clients and time entries")
    parser.add_argument("--user-id", default="demo", help="Account the demo rows belong to")
    parser.add_argument("--entries", type=int, default=40, help="Number of time entries to create")
    parser.add_argument(
        "--min-existing", type=int, default=30,
        help="Keep existing entries when at least this many are present",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for repeatable data")
    args = parser.parse_args()

    setup_logging()
    async with _open_gateway(args.user_id) as gateway:
        await seed(
            gateway,
            args.user_id,
            entries=args.entries,
            min_existing=args.min_existing,
            rng=random.Random(args.seed),
        )
    logger.info("Demo data seeding completed for account '%s'", args.user_id)


if __name__ == "__main__":
    asyncio.run(main())
