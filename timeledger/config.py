from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Literal

_PROJECT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _PROJECT_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Timeledger API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    database_url: str = "sqlite:///./timeledger.db"
    cors_origins: list[str] = ["http://localhost:3000"]

    # Record store: "database" (SQLAlchemy) or "hosted" (PostgREST-style data API)
    record_store_backend: Literal["database", "hosted"] = "database"
    hosted_store_url: str = ""
    hosted_store_api_key: str = ""
    hosted_store_timeout: float = 30.0

    # Reports
    report_page_size: int = 100
    report_currency: str = "USD"
    report_output_dir: str = "reports"
    archive_reports: bool = False

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine — SQL queries
    log_level_http: str = "WARNING"          # httpx / httpcore — outbound HTTP
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_reports: str = "INFO"          # report aggregation + rendering pipeline

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
