"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from timeledger.config import get_settings
from timeledger.infrastructure.database import Base, engine
from timeledger.infrastructure.logging.log_config import setup_logging
from timeledger.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — configure logging, create tables, prepare the report archive."""
    settings = get_settings()
    setup_logging()

    # 1. Create all database tables
    if settings.record_store_backend == "database":
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    else:
        logger.info("Using hosted record store at %s", settings.hosted_store_url)

    # 2. Ensure report archive directory exists
    if settings.archive_reports:
        Path(settings.report_output_dir).mkdir(parents=True, exist_ok=True)

    yield

    await engine.dispose()


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "timeledger.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
