"""PostgreSQL data source.

Uses ``psycopg2`` and its ``ThreadedConnectionPool``. PostgreSQL uses
**format** (``%s``) placeholder style.

Install the driver::

    pip install psycopg2-binary
    # or:  pip install sqlbridge[postgresql]

The driver import is guarded: a missing ``psycopg2`` raises
:class:`~sqlbridge.core.errors.ConfigError` on first use.
"""

from __future__ import annotations

import threading
from typing import Any

from sqlbridge.core.enums import DatabaseType
from sqlbridge.core.errors import ConfigError, DatabaseConnectionError
from sqlbridge.core.protocols import DbApiConnection

from .base import BaseDataSource
from .types import DatabaseConfig


class PostgreSQLDataSource(BaseDataSource):
    """PostgreSQL data source backed by a thread-safe connection pool."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 5432,
        database: str = "",
        username: str | None = None,
        password: str | None = None,
        *,
        pool_size: int = 5,
        connect_timeout: int = 10,
        **kwargs: Any,
    ):
        config = DatabaseConfig(
            db_type=DatabaseType.POSTGRESQL,
            host=host,
            port=port,
            database=database,
            username=username,
            password=password,
            pool_size=pool_size,
            connect_timeout=connect_timeout,
            options=kwargs,
        )
        super().__init__(config)
        self._pool: Any = None
        self._lock = threading.Lock()

    def _open_pool(self) -> Any:
        try:
            import psycopg2
            import psycopg2.pool
        except ImportError:
            raise ConfigError(
                "psycopg2 is required for PostgreSQL. Install with: pip install psycopg2-binary"
            ) from None

        try:
            return psycopg2.pool.ThreadedConnectionPool(
                minconn=1,
                maxconn=self._config.pool_size,
                host=self._config.host,
                port=self._config.effective_port,
                database=self._config.database,
                user=self._config.username,
                password=self._config.password,
                connect_timeout=self._config.connect_timeout,
                **self._config.options,
            )
        except psycopg2.Error as e:
            raise DatabaseConnectionError(
                f"Failed to connect to PostgreSQL: {e}",
                cause=e,
            ).with_context(dialect="postgresql") from e

    def get_connection(self) -> DbApiConnection:
        if self._closed:
            raise DatabaseConnectionError("PostgreSQL data source is closed", retryable=False)
        with self._lock:
            if self._pool is None:
                self._pool = self._open_pool()
        try:
            return self._pool.getconn()
        except Exception as e:
            raise DatabaseConnectionError(
                f"Failed to get PostgreSQL connection from pool: {e}",
                cause=e,
            ).with_context(dialect="postgresql") from e

    def release_connection(self, conn: DbApiConnection) -> None:
        if self._pool is not None:
            self._pool.putconn(conn)
        else:
            self._close_quietly(conn)

    def close(self) -> None:
        with self._lock:
            if self._pool is not None:
                self._pool.closeall()
                self._pool = None
        self._closed = True


__all__ = [
    "PostgreSQLDataSource",
]
