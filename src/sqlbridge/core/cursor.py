"""
Forward-only row cursor over a DB-API cursor.

``RowCursor`` is what row mappers receive. It is positioned on one row at a
time; typed accessors read columns of that row by 0-based index.

Lifecycle::

    RowCursor(cursor, dialect)      # not positioned
        advance() -> True           # on row 1, accessors allowed
        advance() -> False          # exhausted, accessors raise
        close()                     # closed, accessors raise

Accessors return ``None`` for SQL NULL and raise ``TypeMismatchError`` when
the value cannot be represented as the requested type. Reading before the
first ``advance()``, after exhaustion or after ``close()`` raises
``CursorClosedError``.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlbridge.core.errors import BindError, CursorClosedError, TypeMismatchError
from sqlbridge.core.logging import get_logger
from sqlbridge.core.types import ColumnType, SqlType, infer_sql_type

if TYPE_CHECKING:
    from sqlbridge.core.dialect import Dialect

logger = get_logger(__name__)


class RowCursor:
    """Typed, forward-only view of a DB-API result set.

    With ``owns_cursor=False`` closing the view leaves the DB-API cursor
    open for whoever opened it.
    """

    def __init__(self, cursor: Any, dialect: Dialect | None = None, *, owns_cursor: bool = True):
        self._cursor = cursor
        self._dialect = dialect
        self._owns_cursor = owns_cursor
        self._row: Sequence[Any] | None = None
        self._exhausted = False
        self._closed = False

    # -- Navigation ----------------------------------------------------------

    def advance(self) -> bool:
        """Move to the next row; ``False`` once the result set is exhausted."""
        if self._closed:
            raise CursorClosedError("Cannot advance a closed cursor")
        if self._exhausted:
            return False
        try:
            row = self._cursor.fetchone()
        except Exception as e:
            self._row = None
            self._exhausted = True
            raise CursorClosedError(f"Cursor failed while fetching: {e}", cause=e) from e
        if row is None:
            self._row = None
            self._exhausted = True
            return False
        self._row = row
        return True

    def close(self) -> None:
        """Close the cursor and the underlying DB-API cursor. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._row = None
        if not self._owns_cursor:
            return
        try:
            self._cursor.close()
        except Exception as e:
            logger.warning("cursor.close_failed", error=str(e), error_type=type(e).__name__)

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> RowCursor:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -- Metadata ------------------------------------------------------------

    @property
    def column_count(self) -> int:
        description = self._cursor.description
        return len(description) if description else 0

    def column_name(self, index: int) -> str:
        return self._description(index)[0]

    def column_type_id(self, index: int) -> SqlType:
        """Engine-neutral type of column ``index``.

        Uses the dialect's driver type-code mapping, then the value in the
        current row. A column with no type code and no row reads as OTHER.
        """
        type_code = self._description(index)[1]
        if self._dialect is not None and type_code is not None:
            mapped = self._dialect.type_code_to_sql_type(type_code)
            if mapped is not None:
                return mapped
        if self._row is not None:
            return infer_sql_type(self._row[index])
        return SqlType.OTHER

    def _description(self, index: int) -> Sequence[Any]:
        description = self._cursor.description
        if not description:
            raise CursorClosedError("Cursor has no result set")
        if not 0 <= index < len(description):
            raise IndexError(f"Column index {index} out of range (0..{len(description) - 1})")
        return description[index]

    # -- Accessors -----------------------------------------------------------

    def _current(self) -> Sequence[Any]:
        if self._closed:
            raise CursorClosedError("Cursor is closed")
        if self._row is None:
            if self._exhausted:
                raise CursorClosedError("Cursor is exhausted")
            raise CursorClosedError("Cursor is not positioned on a row; call advance() first")
        return self._row

    def get_object(self, index: int) -> Any:
        """Raw driver value of column ``index``."""
        row = self._current()
        if not 0 <= index < len(row):
            raise IndexError(f"Column index {index} out of range (0..{len(row) - 1})")
        return row[index]

    def is_null(self, index: int) -> bool:
        return self.get_object(index) is None

    def _get(self, index: int, column_type: ColumnType) -> Any:
        value = self.get_object(index)
        if value is None:
            return None
        try:
            return column_type.coerce(value)
        except BindError as e:
            raise TypeMismatchError(
                f"Column {index} value {value!r} is not a {column_type.label}",
                cause=e.cause or e,
            ).with_context(column=self._safe_name(index)) from e

    def _safe_name(self, index: int) -> str | None:
        description = self._cursor.description
        if description and 0 <= index < len(description):
            return description[index][0]
        return None

    def get_long(self, index: int) -> int | None:
        return self._get(index, ColumnType.LONG)

    def get_int(self, index: int) -> int | None:
        return self._get(index, ColumnType.INTEGER)

    def get_double(self, index: int) -> float | None:
        return self._get(index, ColumnType.DOUBLE)

    def get_string(self, index: int) -> str | None:
        return self._get(index, ColumnType.STRING)

    def get_boolean(self, index: int) -> bool | None:
        return self._get(index, ColumnType.BOOLEAN)

    def get_bytes(self, index: int) -> bytes | None:
        return self._get(index, ColumnType.BYTES)

    def get_decimal(self, index: int) -> Decimal | None:
        return self._get(index, ColumnType.DECIMAL)

    def get_timestamp(self, index: int) -> datetime | None:
        return self._get(index, ColumnType.DATE)

    def __repr__(self) -> str:
        state = "closed" if self._closed else "exhausted" if self._exhausted else "open"
        return f"RowCursor({state}, columns={self.column_count if not self._closed else '?'})"


__all__ = ["RowCursor"]
