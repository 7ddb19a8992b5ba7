"""
Canonical protocol definitions for sqlbridge.

The access layer talks to drivers only through the DB-API 2.0 shapes
below, and obtains connections only through a ``DataSource``. Any object
with the right methods satisfies them: sqlite3, psycopg2, mysql.connector,
ibm_db_dbi and oracledb connections all do, as do test doubles.

Architecture:
    ::

        protocols.py
        ├── DbApiCursor      cursor.execute / fetchone / description / lastrowid
        ├── DbApiConnection  cursor() / commit() / rollback() / close()
        └── DataSource       get_connection() / release_connection() / close()

        DatabaseAccess ──► DataSource ──► DbApiConnection ──► DbApiCursor

Guardrails:
    ❌ DON'T: Import a driver module in the access layer
    ✅ DO: Depend on these shapes; drivers load inside adapters/

Tags:
    protocol, dbapi, connection, data-source, sqlbridge
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from sqlbridge.core.enums import DatabaseType


@runtime_checkable
class DbApiCursor(Protocol):
    """Subset of the PEP 249 cursor used by the executor."""

    description: Sequence[Sequence[Any]] | None
    rowcount: int

    def execute(self, operation: str, parameters: Sequence[Any] = ...) -> Any:
        ...

    def fetchone(self) -> Sequence[Any] | None:
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class DbApiConnection(Protocol):
    """Subset of the PEP 249 connection used by the executor."""

    def cursor(self) -> DbApiCursor:
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class DataSource(Protocol):
    """
    Supplier of live connections for one database.

    ``get_connection()`` hands out a connection that is exclusively the
    caller's until ``release_connection()`` gives it back. Pooled sources
    return it to the pool, unpooled ones close it.
    """

    @property
    def database_type(self) -> DatabaseType:
        ...

    def get_connection(self) -> DbApiConnection:
        ...

    def release_connection(self, conn: DbApiConnection) -> None:
        ...

    def close(self) -> None:
        ...


__all__ = [
    "DbApiCursor",
    "DbApiConnection",
    "DataSource",
]
