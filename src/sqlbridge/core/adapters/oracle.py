"""Oracle data source.

Uses ``oracledb`` (python-oracledb), the Oracle DB driver that
supersedes ``cx_Oracle``. Oracle uses **numeric** (``:1``, ``:2``)
placeholder style.

Install the driver::

    pip install oracledb
    # or:  pip install sqlbridge[oracle]

The driver import is guarded: a missing ``oracledb`` raises
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


class OracleDataSource(BaseDataSource):
    """Oracle data source backed by an ``oracledb`` session pool.

    ``database`` is the service name.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 1521,
        database: str = "",
        username: str | None = None,
        password: str | None = None,
        *,
        pool_size: int = 5,
        **kwargs: Any,
    ):
        config = DatabaseConfig(
            db_type=DatabaseType.ORACLE,
            host=host,
            port=port,
            database=database,
            username=username,
            password=password,
            pool_size=pool_size,
            options=kwargs,
        )
        super().__init__(config)
        self._pool: Any = None
        self._lock = threading.Lock()

    def _open_pool(self) -> Any:
        try:
            import oracledb
        except ImportError:
            raise ConfigError(
                "oracledb is required for Oracle. Install with: pip install oracledb"
            ) from None

        try:
            dsn = oracledb.makedsn(
                self._config.host,
                self._config.effective_port,
                service_name=self._config.database,
            )
            return oracledb.create_pool(
                user=self._config.username,
                password=self._config.password,
                dsn=dsn,
                min=1,
                max=self._config.pool_size,
                increment=1,
                **self._config.options,
            )
        except Exception as e:
            raise DatabaseConnectionError(
                f"Failed to connect to Oracle: {e}",
                cause=e,
            ).with_context(dialect="oracle") from e

    def get_connection(self) -> DbApiConnection:
        if self._closed:
            raise DatabaseConnectionError("Oracle data source is closed", retryable=False)
        with self._lock:
            if self._pool is None:
                self._pool = self._open_pool()
        try:
            return self._pool.acquire()
        except Exception as e:
            raise DatabaseConnectionError(
                f"Failed to acquire Oracle connection: {e}",
                cause=e,
            ).with_context(dialect="oracle") from e

    def release_connection(self, conn: DbApiConnection) -> None:
        if self._pool is not None:
            self._pool.release(conn)
        else:
            self._close_quietly(conn)

    def close(self) -> None:
        with self._lock:
            if self._pool is not None:
                self._pool.close()
                self._pool = None
        self._closed = True


__all__ = [
    "OracleDataSource",
]
