"""Typed runtime configuration for the movie catalog service."""

from __future__ import annotations

import logging
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Scripts and Alembic import settings without going through ``main``; loading
# the .env file here gives them the same view of the environment as the API.
load_dotenv()

DEFAULT_SQLITE_DATABASE_URL = "sqlite+aiosqlite:///./data/app.db"
SQLITE_ASYNC_PREFIX = "sqlite+aiosqlite://"
POSTGRES_ASYNC_PREFIX = "postgresql+psycopg://"
POSTGRES_SYNC_PREFIXES = ("postgres://", "postgresql://")
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_IDENTITY_HEADER = "X-Authenticated-User"


class AppSettings(BaseSettings):
    """Environment-backed settings plus the values derived from them.

    Derived properties (the async database URL, backend type, parsed CORS
    origins) live here so the connection module, the startup preflight and
    the scripts all interpret the environment identically.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    database_url: str | None = Field(
        default=None,
        alias="DATABASE_URL",
        description=(
            "PostgreSQL or SQLite connection string. ``postgres://`` and"
            " ``postgresql://`` URLs are rewritten for the async psycopg driver."
        ),
    )
    use_sqlite: bool = Field(
        default=False,
        alias="USE_SQLITE",
        description="Ignore DATABASE_URL and use the bundled SQLite database file.",
    )
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, alias="LOG_LEVEL")
    cors_allow_origins_raw: str | None = Field(
        default=None,
        alias="CORS_ALLOW_ORIGINS",
        description="Comma-separated origins allowed in addition to localhost.",
    )
    cors_allow_origin_regex: str | None = Field(
        default=None, alias="CORS_ALLOW_ORIGIN_REGEX"
    )
    slow_query_threshold: float = Field(
        default=0.1,
        alias="SLOW_QUERY_THRESHOLD",
        ge=0,
        description="Statements slower than this many seconds are logged.",
    )
    identity_header: str = Field(
        default=DEFAULT_IDENTITY_HEADER,
        alias="IDENTITY_HEADER",
        description=(
            "Header in which the authentication gateway forwards the verified"
            " username. The gateway must drop any client-supplied copy."
        ),
    )

    @field_validator("identity_header")
    @classmethod
    def identity_header_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("IDENTITY_HEADER must name a request header")
        return value

    @property
    def resolved_database_url(self) -> str:
        """Async SQLAlchemy URL for the configured backend, SQLite when unset."""

        if self.use_sqlite or not self.database_url:
            return DEFAULT_SQLITE_DATABASE_URL

        url = self.database_url.strip()
        for prefix in POSTGRES_SYNC_PREFIXES:
            if url.startswith(prefix):
                return POSTGRES_ASYNC_PREFIX + url[len(prefix) :]
        if url.startswith((POSTGRES_ASYNC_PREFIX, SQLITE_ASYNC_PREFIX)):
            return url

        raise RuntimeError(
            f"Unsupported DATABASE_URL scheme; expected PostgreSQL or sqlite+aiosqlite: {url}"
        )

    @property
    def database_type(self) -> str:
        """``sqlite`` or ``postgresql`` depending on the resolved URL."""

        if self.resolved_database_url.startswith("sqlite"):
            return "sqlite"
        return "postgresql"

    @property
    def cors_allow_origins(self) -> list[str]:
        """Configured extra origins without whitespace or trailing slashes."""

        if not self.cors_allow_origins_raw:
            return []
        origins = (item.strip().rstrip("/") for item in self.cors_allow_origins_raw.split(","))
        return [origin for origin in origins if origin]

    @property
    def log_level_numeric(self) -> int:
        level = logging.getLevelName(self.log_level.strip().upper())
        return level if isinstance(level, int) else logging.INFO

    def optional_config_warnings(self) -> list[str]:
        """Describe optional settings left at defaults that matter in production."""

        warnings: list[str] = []
        if not self.database_url and not self.use_sqlite:
            warnings.append(
                "DATABASE_URL is not set - falling back to the local SQLite database"
            )
        if not self.cors_allow_origins:
            warnings.append(
                "CORS_ALLOW_ORIGINS is not set - only localhost origins may call the API"
            )
        return warnings


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return the process-wide :class:`AppSettings` instance."""

    return AppSettings()


__all__ = [
    "AppSettings",
    "DEFAULT_IDENTITY_HEADER",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_SQLITE_DATABASE_URL",
    "POSTGRES_ASYNC_PREFIX",
    "POSTGRES_SYNC_PREFIXES",
    "SQLITE_ASYNC_PREFIX",
    "get_settings",
]
