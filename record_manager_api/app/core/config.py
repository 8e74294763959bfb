"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables instead of relying on ``pydantic-settings``.
Defaults are provided for all fields.  In a production deployment you
should override these via environment variables.

The runtime mode (development vs. production) is deliberately *not*
part of ``Settings``: error handlers call :func:`is_development` on
every request so the flag can be flipped without rebuilding the app.
"""

import os
from dataclasses import dataclass, field
from typing import List


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Record Manager API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Path to the SQLite database file.  Relative paths are resolved
    # against the package root by ``core.db``.  ``:memory:`` is not
    # supported because every service call opens its own connection.
    database_url: str = os.getenv("DATABASE_URL", "record_manager.db")

    # Comma-separated list of origins allowed by the CORS middleware.
    cors_origins: List[str] = field(
        default_factory=lambda: _split_csv(os.getenv("CORS_ORIGINS", "*"))
    )

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))


def get_environment() -> str:
    """Return the current runtime mode, lower-cased."""
    return os.getenv("ENVIRONMENT", "production").strip().lower()


def is_development() -> bool:
    """Whether error responses may reveal exception details."""
    return get_environment() == "development"


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should therefore be set before importing this module.
settings = Settings()
