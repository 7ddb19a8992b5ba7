"""IBM DB2 data source.

Uses ``ibm_db_dbi``, the DB-API 2.0 interface from the ``ibm-db``
package. DB2 uses **qmark** (``?``) placeholder style natively.

Install the driver::

    pip install ibm-db
    # or:  pip install sqlbridge[db2]

The driver import is guarded: a missing ``ibm_db`` raises
:class:`~sqlbridge.core.errors.ConfigError` on first use rather than at
import time.
"""

from __future__ import annotations

from typing import Any

from sqlbridge.core.enums import DatabaseType
from sqlbridge.core.errors import ConfigError, DatabaseConnectionError
from sqlbridge.core.protocols import DbApiConnection

from .base import BaseDataSource
from .types import DatabaseConfig


class DB2DataSource(BaseDataSource):
    """IBM DB2 data source.

    Opens one ``ibm_db_dbi`` connection per ``get_connection()`` and closes
    it on release. ``IDENTITY_VAL_LOCAL()`` is session scoped, so an insert
    and its key query always share the lent connection.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 50000,
        database: str = "",
        username: str | None = None,
        password: str | None = None,
        *,
        schema: str | None = None,
        **kwargs: Any,
    ):
        config = DatabaseConfig(
            db_type=DatabaseType.DB2,
            host=host,
            port=port,
            database=database,
            username=username,
            password=password,
            options={**kwargs, **({"schema": schema} if schema else {})},
        )
        super().__init__(config)

    def get_connection(self) -> DbApiConnection:
        if self._closed:
            raise DatabaseConnectionError("DB2 data source is closed", retryable=False)
        try:
            import ibm_db
            import ibm_db_dbi
        except ImportError:
            raise ConfigError(
                "ibm-db is required for DB2. Install with: pip install ibm-db"
            ) from None

        try:
            ibm_conn = ibm_db.connect(self._config.to_connection_string(), "", "")
            conn = ibm_db_dbi.Connection(ibm_conn)

            schema = self._config.options.get("schema")
            if schema:
                cursor = conn.cursor()
                cursor.execute(f"SET SCHEMA {schema}")
                cursor.close()
        except Exception as e:
            raise DatabaseConnectionError(
                f"Failed to connect to DB2: {e}",
                cause=e,
            ).with_context(dialect="db2") from e
        return conn

    def release_connection(self, conn: DbApiConnection) -> None:
        self._close_quietly(conn)

    def close(self) -> None:
        self._closed = True


__all__ = [
    "DB2DataSource",
]
