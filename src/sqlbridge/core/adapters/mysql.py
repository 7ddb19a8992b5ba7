"""MySQL data source.

Uses ``mysql.connector`` from the ``mysql-connector-python`` package.
MySQL uses **format** (``%s``) placeholder style.

Install the driver::

    pip install mysql-connector-python
    # or:  pip install sqlbridge[mysql]

The driver import is guarded: a missing ``mysql.connector`` raises
:class:`~sqlbridge.core.errors.ConfigError` on first use.
"""

from __future__ import annotations

import threading
import uuid
from typing import Any

from sqlbridge.core.enums import DatabaseType
from sqlbridge.core.errors import ConfigError, DatabaseConnectionError
from sqlbridge.core.protocols import DbApiConnection

from .base import BaseDataSource
from .types import DatabaseConfig


class MySQLDataSource(BaseDataSource):
    """MySQL / MariaDB data source using ``mysql.connector`` pooling.

    Pooled connections go back to the pool when closed, so
    ``release_connection()`` simply closes them.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 3306,
        database: str = "",
        username: str | None = None,
        password: str | None = None,
        *,
        pool_size: int = 5,
        charset: str = "utf8mb4",
        **kwargs: Any,
    ):
        config = DatabaseConfig(
            db_type=DatabaseType.MYSQL,
            host=host,
            port=port,
            database=database,
            username=username,
            password=password,
            pool_size=pool_size,
            options={**kwargs, "charset": charset},
        )
        super().__init__(config)
        self._pool: Any = None
        self._lock = threading.Lock()

    def _open_pool(self) -> Any:
        try:
            from mysql.connector import pooling
        except ImportError:
            raise ConfigError(
                "mysql-connector-python is required for MySQL. "
                "Install with: pip install mysql-connector-python"
            ) from None

        try:
            return pooling.MySQLConnectionPool(
                pool_name=f"sqlbridge_{uuid.uuid4().hex[:8]}",
                pool_size=self._config.pool_size,
                host=self._config.host,
                port=self._config.effective_port,
                database=self._config.database,
                user=self._config.username,
                password=self._config.password,
                connect_timeout=self._config.connect_timeout,
                autocommit=False,
                **self._config.options,
            )
        except Exception as e:
            raise DatabaseConnectionError(
                f"Failed to connect to MySQL: {e}",
                cause=e,
            ).with_context(dialect="mysql") from e

    def get_connection(self) -> DbApiConnection:
        if self._closed:
            raise DatabaseConnectionError("MySQL data source is closed", retryable=False)
        with self._lock:
            if self._pool is None:
                self._pool = self._open_pool()
        try:
            return self._pool.get_connection()
        except Exception as e:
            raise DatabaseConnectionError(
                f"Failed to get MySQL connection from pool: {e}",
                cause=e,
            ).with_context(dialect="mysql") from e

    def release_connection(self, conn: DbApiConnection) -> None:
        # mysql.connector returns pooled connections on close
        self._close_quietly(conn)

    def close(self) -> None:
        # mysql.connector pools have no closeall(); idle connections are dropped with the pool
        with self._lock:
            self._pool = None
        self._closed = True


__all__ = [
    "MySQLDataSource",
]
