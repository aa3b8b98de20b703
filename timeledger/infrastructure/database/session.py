"""SQLAlchemy database session and engine configuration."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from timeledger.config import get_settings

_ASYNC_DRIVERS = {
    "sqlite:///": "sqlite+aiosqlite:///",
    "postgresql://": "postgresql+asyncpg://",
    "postgres://": "postgresql+asyncpg://",
}


def _get_async_url(url: str) -> str:
    """Convert a sync SQLAlchemy URL to an async one (aiosqlite / asyncpg)."""
    for prefix, async_prefix in _ASYNC_DRIVERS.items():
        if url.startswith(prefix):
            return url.replace(prefix, async_prefix, 1)
    return url


settings = get_settings()
_async_url = _get_async_url(settings.database_url)

# SQL statement logging goes through the sqlalchemy.engine logger (LOG_LEVEL_SQL)
engine = create_async_engine(_async_url, future=True)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """Unit of work: commits when the block finishes, rolls back if it raised."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
