"""Environment-driven settings for sqlbridge.

``BridgeSettings`` collects the connection parameters and logging options
an application needs to build a data source, from ``SQLBRIDGE_*``
environment variables and an optional ``.env`` file.

Manifesto:
    Configuration should be explicit, validated, and environment-driven.

    - **Pydantic validation:** Type-checked at startup, not on first query
    - **Environment-driven:** Reads from env vars and .env files
    - **One URL or fields:** ``SQLBRIDGE_DATABASE_URL`` wins over the
      individual connection fields
    - **Sensible defaults:** An in-memory SQLite database out of the box

Examples:
    >>> from sqlbridge.core.settings import BridgeSettings
    >>> settings = BridgeSettings(database_url="postgresql://app:pw@db:5432/orders")
    >>> settings.to_database_config().db_type.value
    'postgresql'

Tags:
    settings, configuration, pydantic, environment, sqlbridge
"""

from __future__ import annotations

from typing import Any
from urllib.parse import parse_qsl, unquote, urlsplit

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sqlbridge.core.adapters.types import DatabaseConfig
from sqlbridge.core.dialect import dialect_for_url
from sqlbridge.core.enums import DatabaseType

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class BridgeSettings(BaseSettings):
    """Connection and logging settings.

    Fields
    ──────
    database_url : Full URL (``postgresql://user:pw@host:5432/db``); overrides the fields below
    db_type      : Engine when no URL is given
    path         : SQLite database file (``:memory:`` by default)
    host, port, database, username, password : network engines
    pool_size    : Connections per pool
    log_level    : Structlog log level
    json_logs    : JSON output (None = auto-detect from TTY)
    """

    model_config = SettingsConfigDict(
        env_prefix="SQLBRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Connection ───────────────────────────────────────────────
    database_url: str | None = None
    db_type: DatabaseType = DatabaseType.SQLITE
    path: str = ":memory:"
    host: str = "localhost"
    port: int | None = None
    database: str = ""
    username: str | None = None
    password: str | None = None
    pool_size: int = Field(default=5, ge=1, le=100)
    connect_timeout: int = Field(default=10, ge=1)

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = None

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}")
        return level

    def resolved_db_type(self) -> DatabaseType:
        if self.database_url:
            return dialect_for_url(self.database_url).database_type
        return self.db_type

    def to_database_config(self) -> DatabaseConfig:
        """Build the ``DatabaseConfig`` for these settings."""
        if self.database_url:
            return _config_from_url(self.database_url, self)
        return DatabaseConfig(
            db_type=self.db_type,
            path=self.path,
            host=self.host,
            port=self.port,
            database=self.database,
            username=self.username,
            password=self.password,
            pool_size=self.pool_size,
            connect_timeout=self.connect_timeout,
        )


def _config_from_url(url: str, settings: BridgeSettings) -> DatabaseConfig:
    db_type = dialect_for_url(url).database_type

    if db_type is DatabaseType.SQLITE:
        # sqlite:///relative.db, sqlite:////abs/path.db, sqlite:///:memory:, or a bare path
        if "://" in url:
            path = url.split("://", 1)[1][1:]
        else:
            path = url.removeprefix("sqlite:")
        return DatabaseConfig(db_type=db_type, path=path or ":memory:")

    parts = urlsplit(url)
    options: dict[str, Any] = dict(parse_qsl(parts.query))
    return DatabaseConfig(
        db_type=db_type,
        host=parts.hostname or settings.host,
        port=parts.port or settings.port,
        database=parts.path.lstrip("/") or settings.database,
        username=unquote(parts.username) if parts.username else settings.username,
        password=unquote(parts.password) if parts.password else settings.password,
        pool_size=settings.pool_size,
        connect_timeout=settings.connect_timeout,
        options=options,
    )


__all__ = ["BridgeSettings"]
