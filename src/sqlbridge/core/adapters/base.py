"""Data source base class.

Manifesto:
    All data sources share the same small lifecycle: lend a connection,
    take it back, shut down. The abstract base class fixes that contract so
    ``DatabaseAccess`` never depends on a specific driver or pool.

Features:
    - Abstract ``get_connection()``, ``release_connection()``, ``close()``
    - Dialect and database-type introspection
    - Context-manager protocol for shutdown
    - Config-driven construction from ``DatabaseConfig``

Tags:
    sqlbridge, database, abstract-base, data-source
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from sqlbridge.core.dialect import Dialect, get_dialect
from sqlbridge.core.enums import DatabaseType
from sqlbridge.core.logging import get_logger
from sqlbridge.core.protocols import DbApiConnection

from .types import DatabaseConfig

logger = get_logger(__name__)


class BaseDataSource(ABC):
    """
    Abstract base class for data sources.

    Subclasses open connections lazily: nothing touches the driver until
    the first ``get_connection()``.
    """

    def __init__(self, config: DatabaseConfig):
        self._config = config
        self._closed = False

    @property
    def config(self) -> DatabaseConfig:
        return self._config

    @property
    def database_type(self) -> DatabaseType:
        return self._config.db_type

    @property
    def dialect(self) -> Dialect:
        """SQL dialect for this source's database type."""
        return get_dialect(self._config.db_type)

    @property
    def is_closed(self) -> bool:
        return self._closed

    @abstractmethod
    def get_connection(self) -> DbApiConnection:
        """Lend a connection; the caller must hand it to ``release_connection``."""
        ...

    @abstractmethod
    def release_connection(self, conn: DbApiConnection) -> None:
        """Return a connection obtained from ``get_connection``."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release pooled resources. Idempotent."""
        ...

    def _close_quietly(self, conn: Any) -> None:
        try:
            conn.close()
        except Exception as e:
            logger.warning(
                "connection.close_failed",
                db_type=self.database_type.value,
                error=str(e),
            )

    def __enter__(self) -> BaseDataSource:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(db_type={self.database_type.value!r})"


__all__ = [
    "BaseDataSource",
]
