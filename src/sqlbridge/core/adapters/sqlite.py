"""SQLite data source."""

from __future__ import annotations

import sqlite3
import uuid
from typing import Any

from sqlbridge.core.enums import DatabaseType
from sqlbridge.core.errors import DatabaseConnectionError
from sqlbridge.core.protocols import DbApiConnection

from .base import BaseDataSource
from .types import DatabaseConfig


class SQLiteDataSource(BaseDataSource):
    """
    SQLite data source.

    Uses the built-in sqlite3 module and opens a fresh connection for every
    ``get_connection()``; ``release_connection()`` closes it. Suitable for:
    - Development and testing
    - Single-process applications

    ``":memory:"`` is mapped to a private shared-cache database so that
    every connection of this source sees the same data. A keeper connection
    holds it open until ``close()``.
    """

    def __init__(
        self,
        path: str = ":memory:",
        *,
        readonly: bool = False,
        timeout: float = 5.0,
        **kwargs: Any,
    ):
        config = DatabaseConfig(
            db_type=DatabaseType.SQLITE,
            path=path,
            options={"readonly": readonly, **kwargs},
        )
        super().__init__(config)
        self._timeout = timeout
        self._keeper: sqlite3.Connection | None = None

        if path == ":memory:":
            self._target = f"file:sqlbridge-{uuid.uuid4().hex}?mode=memory&cache=shared"
            self._keeper = self._connect()
        else:
            self._target = path

    @property
    def target(self) -> str:
        """Path or URI every connection opens."""
        return self._target

    def _connect(self) -> sqlite3.Connection:
        uri = self._target.startswith("file:")
        try:
            conn = sqlite3.connect(
                self._target,
                timeout=self._timeout,
                check_same_thread=False,
                uri=uri,
            )
            # Enable foreign keys
            conn.execute("PRAGMA foreign_keys = ON")
            if self._config.options.get("readonly"):
                conn.execute("PRAGMA query_only = ON")
        except sqlite3.Error as e:
            raise DatabaseConnectionError(
                f"Failed to connect to SQLite: {e}",
                cause=e,
            ).with_context(dialect="sqlite") from e
        return conn

    def get_connection(self) -> DbApiConnection:
        if self._closed:
            raise DatabaseConnectionError("SQLite data source is closed", retryable=False)
        return self._connect()

    def release_connection(self, conn: DbApiConnection) -> None:
        self._close_quietly(conn)

    def close(self) -> None:
        if self._keeper is not None:
            self._close_quietly(self._keeper)
            self._keeper = None
        self._closed = True


__all__ = [
    "SQLiteDataSource",
]
