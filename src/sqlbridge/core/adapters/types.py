"""Data-source configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sqlbridge.core.enums import DatabaseType
from sqlbridge.core.errors import ConfigError

# Default port per engine, used when a config leaves ``port`` unset
DEFAULT_PORTS = {
    DatabaseType.POSTGRESQL: 5432,
    DatabaseType.MYSQL: 3306,
    DatabaseType.DB2: 50000,
    DatabaseType.ORACLE: 1521,
}


@dataclass
class DatabaseConfig:
    """
    Connection parameters for one data source.

    Different fields are used by different database types; ``path`` is
    SQLite only, the network fields are for everything else.
    """

    db_type: DatabaseType = DatabaseType.SQLITE

    # SQLite
    path: str | None = None

    # PostgreSQL / MySQL / DB2 / Oracle
    host: str = "localhost"
    port: int | None = None
    database: str = ""
    username: str | None = None
    password: str | None = None

    # Connection pool
    pool_size: int = 5
    connect_timeout: int = 10

    # Extra options (driver-specific)
    options: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.db_type, str) and not isinstance(self.db_type, DatabaseType):
            try:
                self.db_type = DatabaseType(self.db_type.lower())
            except ValueError:
                raise ConfigError(f"Unknown database type: {self.db_type!r}") from None
        if self.pool_size < 1:
            raise ConfigError(f"pool_size must be at least 1, got {self.pool_size}")

    @property
    def effective_port(self) -> int | None:
        return self.port or DEFAULT_PORTS.get(self.db_type)

    def to_connection_string(self) -> str:
        """Connection string for the database type (passwords included)."""
        port = self.effective_port
        match self.db_type:
            case DatabaseType.SQLITE:
                return self.path or ":memory:"
            case DatabaseType.POSTGRESQL:
                return f"postgresql://{self.username}:{self.password}@{self.host}:{port}/{self.database}"
            case DatabaseType.MYSQL:
                return f"mysql://{self.username}:{self.password}@{self.host}:{port}/{self.database}"
            case DatabaseType.DB2:
                return (
                    f"DATABASE={self.database};"
                    f"HOSTNAME={self.host};"
                    f"PORT={port};"
                    f"PROTOCOL=TCPIP;"
                    f"UID={self.username or ''};"
                    f"PWD={self.password or ''};"
                )
            case DatabaseType.ORACLE:
                return f"{self.host}:{port}/{self.database}"
            case _:
                raise ConfigError(f"Connection string not supported for: {self.db_type}")


__all__ = [
    "DEFAULT_PORTS",
    "DatabaseConfig",
]
