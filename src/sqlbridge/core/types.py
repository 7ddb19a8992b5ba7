"""Column type registry.

Maps logical field semantics (``ColumnType``) to engine-neutral SQL type
identifiers (``SqlType``) and back, and converts raw result values into
numeric keys. The registry is a pure function table: enum members and a
frozen lookup dict, safe for concurrent reads.

``SqlType`` reuses the JDBC ``java.sql.Types`` codes so identifiers stay
stable across drivers; dialects translate driver-specific type codes into
these values.

Examples:
    >>> lookup_by_sql_type_id(-5) is ColumnType.LONG
    True
    >>> ColumnType.LONG.to_numeric_key(42)
    42
    >>> ColumnType.BOOLEAN.coerce(1)
    True
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from sqlbridge.core.errors import BindError, InvalidKeyTypeError, UnknownTypeError

if TYPE_CHECKING:
    from sqlbridge.core.cursor import RowCursor


class SqlType(IntEnum):
    """Engine-neutral SQL type identifiers (JDBC codes)."""

    BIT = -7
    TINYINT = -6
    BIGINT = -5
    LONGVARBINARY = -4
    VARBINARY = -3
    BINARY = -2
    LONGVARCHAR = -1
    NULL = 0
    CHAR = 1
    NUMERIC = 2
    DECIMAL = 3
    INTEGER = 4
    SMALLINT = 5
    FLOAT = 6
    REAL = 7
    DOUBLE = 8
    VARCHAR = 12
    BOOLEAN = 16
    DATE = 91
    TIME = 92
    TIMESTAMP = 93
    OTHER = 1111
    BLOB = 2004
    CLOB = 2005


# Integer ranges for the fixed-width integral column types
_INT_RANGES = {
    "byte": (-(2**7), 2**7 - 1),
    "short": (-(2**15), 2**15 - 1),
    "integer": (-(2**31), 2**31 - 1),
    "long": (-(2**63), 2**63 - 1),
}


def _to_int(value: Any) -> int:
    """Integral coercion shared by binding and key conversion; raises ValueError."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{value!r} is not integral")
        return int(value)
    if isinstance(value, Decimal):
        if not value.is_finite() or value != value.to_integral_value():
            raise ValueError(f"{value!r} is not integral")
        return int(value)
    if isinstance(value, str):
        return int(value.strip())
    raise ValueError(f"{type(value).__name__} is not an integer type")


class ColumnType(Enum):
    """
    Logical column semantics.

    Each member carries:
        sql_type: engine-neutral ``SqlType`` identifier
        is_numeric: numeric family (integral or fractional)
        is_id_type: may back a generated id column
        key_convertible: values can be converted to a numeric key
    """

    STRING = ("string", SqlType.VARCHAR, False, False, False)
    LONG_STRING = ("long_string", SqlType.LONGVARCHAR, False, False, False)
    CHAR = ("char", SqlType.CHAR, False, False, False)
    BOOLEAN = ("boolean", SqlType.BOOLEAN, False, False, False)
    DATE = ("date", SqlType.TIMESTAMP, False, False, False)
    BYTE = ("byte", SqlType.TINYINT, True, False, True)
    SHORT = ("short", SqlType.SMALLINT, True, True, True)
    INTEGER = ("integer", SqlType.INTEGER, True, True, True)
    LONG = ("long", SqlType.BIGINT, True, True, True)
    FLOAT = ("float", SqlType.REAL, True, False, False)
    DOUBLE = ("double", SqlType.DOUBLE, True, False, False)
    DECIMAL = ("decimal", SqlType.DECIMAL, True, False, True)
    BYTES = ("bytes", SqlType.VARBINARY, False, False, False)
    UUID = ("uuid", SqlType.OTHER, False, False, False)

    def __init__(
        self,
        label: str,
        sql_type: SqlType,
        is_numeric: bool,
        is_id_type: bool,
        key_convertible: bool,
    ):
        self.label = label
        self.sql_type = sql_type
        self.is_numeric = is_numeric
        self.is_id_type = is_id_type
        self.key_convertible = key_convertible

    @classmethod
    def from_label(cls, label: str) -> ColumnType:
        """Look up a member by its label (``'long'``, ``'string'``, ...)."""
        for member in cls:
            if member.label == label.lower():
                return member
        raise UnknownTypeError(label, f"Unknown column type: {label!r}")

    # -- Binding -------------------------------------------------------------

    def coerce(self, value: Any) -> Any:
        """Normalize ``value`` to this type's canonical Python type.

        Raises:
            BindError: If the value cannot represent this column type.
        """
        try:
            return self._coerce(value)
        except (TypeError, ValueError, ArithmeticError) as e:
            raise BindError(
                f"Cannot bind {type(value).__name__} value {value!r} as {self.label}: {e}",
                cause=e,
            ) from e

    def _coerce(self, value: Any) -> Any:
        match self:
            case ColumnType.STRING | ColumnType.LONG_STRING:
                if isinstance(value, (bytes, bytearray, memoryview)):
                    raise TypeError("binary value for a string column")
                return value if isinstance(value, str) else str(value)
            case ColumnType.CHAR:
                if not isinstance(value, str) or len(value) != 1:
                    raise ValueError("expected a single character")
                return value
            case ColumnType.BOOLEAN:
                if isinstance(value, bool):
                    return value
                if isinstance(value, int) and value in (0, 1):
                    return bool(value)
                raise ValueError("expected a boolean or 0/1")
            case ColumnType.BYTE | ColumnType.SHORT | ColumnType.INTEGER | ColumnType.LONG:
                result = _to_int(value)
                low, high = _INT_RANGES[self.label]
                if not low <= result <= high:
                    raise ValueError(f"out of range for {self.label}")
                return result
            case ColumnType.FLOAT | ColumnType.DOUBLE:
                if isinstance(value, (bytes, bytearray)):
                    raise TypeError("binary value for a floating point column")
                return float(value)
            case ColumnType.DECIMAL:
                if isinstance(value, float):
                    return Decimal(str(value))
                return Decimal(value)
            case ColumnType.BYTES:
                if not isinstance(value, (bytes, bytearray, memoryview)):
                    raise TypeError("expected bytes")
                return bytes(value)
            case ColumnType.DATE:
                if isinstance(value, datetime):
                    return value
                if isinstance(value, date):
                    return datetime(value.year, value.month, value.day)
                if isinstance(value, str):
                    return datetime.fromisoformat(value)
                raise TypeError("expected a datetime")
            case ColumnType.UUID:
                if isinstance(value, uuid.UUID):
                    return value
                return uuid.UUID(str(value))
        raise TypeError(f"unhandled column type {self!r}")  # pragma: no cover

    # -- Key conversion ------------------------------------------------------

    def to_numeric_key(self, raw: Any) -> int:
        """Convert a raw generated-key value into an integer key.

        Raises:
            InvalidKeyTypeError: If this type is not integer-family or the
                value is NULL or not integral.
        """
        if not self.key_convertible:
            raise InvalidKeyTypeError(
                f"Generated key of type {self.label} ({self.sql_type.name}) "
                f"is not numeric, value {raw!r}"
            )
        if raw is None:
            raise InvalidKeyTypeError(f"Generated key of type {self.label} is NULL")
        try:
            return _to_int(raw)
        except ValueError as e:
            raise InvalidKeyTypeError(
                f"Generated key value {raw!r} cannot be converted to an integer",
                cause=e,
            ) from e

    def convert_to_numeric_key(self, cursor: RowCursor, column_index: int) -> int:
        """Read ``column_index`` from the cursor's current row as a numeric key."""
        return self.to_numeric_key(cursor.get_object(column_index))


_BY_SQL_TYPE: MappingProxyType[SqlType, ColumnType] = MappingProxyType({
    SqlType.VARCHAR: ColumnType.STRING,
    SqlType.LONGVARCHAR: ColumnType.LONG_STRING,
    SqlType.CLOB: ColumnType.LONG_STRING,
    SqlType.CHAR: ColumnType.CHAR,
    SqlType.BOOLEAN: ColumnType.BOOLEAN,
    SqlType.BIT: ColumnType.BOOLEAN,
    SqlType.TIMESTAMP: ColumnType.DATE,
    SqlType.DATE: ColumnType.DATE,
    SqlType.TINYINT: ColumnType.BYTE,
    SqlType.SMALLINT: ColumnType.SHORT,
    SqlType.INTEGER: ColumnType.INTEGER,
    SqlType.BIGINT: ColumnType.LONG,
    SqlType.REAL: ColumnType.FLOAT,
    SqlType.FLOAT: ColumnType.DOUBLE,
    SqlType.DOUBLE: ColumnType.DOUBLE,
    SqlType.DECIMAL: ColumnType.DECIMAL,
    SqlType.NUMERIC: ColumnType.DECIMAL,
    SqlType.VARBINARY: ColumnType.BYTES,
    SqlType.BINARY: ColumnType.BYTES,
    SqlType.LONGVARBINARY: ColumnType.BYTES,
    SqlType.BLOB: ColumnType.BYTES,
})


def lookup_by_sql_type_id(sql_type_id: int) -> ColumnType:
    """Resolve an engine-neutral SQL type id to its column type.

    Raises:
        UnknownTypeError: If the id is not a known ``SqlType`` or has no
            column type mapping (``TIME``, ``OTHER``, ``NULL``).
    """
    try:
        sql_type = SqlType(sql_type_id)
    except ValueError:
        raise UnknownTypeError(sql_type_id) from None
    try:
        return _BY_SQL_TYPE[sql_type]
    except KeyError:
        raise UnknownTypeError(
            sql_type_id, f"No column type registered for {sql_type.name} ({sql_type_id})"
        ) from None


def infer_sql_type(value: Any) -> SqlType:
    """Infer the SQL type id of a Python value.

    Used for drivers that report no type code in ``cursor.description``.
    """
    if value is None:
        return SqlType.NULL
    if isinstance(value, bool):
        return SqlType.BOOLEAN
    if isinstance(value, int):
        return SqlType.BIGINT
    if isinstance(value, float):
        return SqlType.DOUBLE
    if isinstance(value, Decimal):
        return SqlType.DECIMAL
    if isinstance(value, str):
        return SqlType.VARCHAR
    if isinstance(value, (bytes, bytearray, memoryview)):
        return SqlType.VARBINARY
    if isinstance(value, datetime):
        return SqlType.TIMESTAMP
    if isinstance(value, date):
        return SqlType.DATE
    return SqlType.OTHER


def _identity(value: Any) -> Any:
    return value


@dataclass(frozen=True)
class TypeTag:
    """Column type paired with the dialect-specific bind conversion.

    Built by ``Dialect.type_tag()``; one tag per statement argument.
    """

    column_type: ColumnType
    dialect: str = "generic"
    binder: Callable[[Any], Any] = _identity

    def bind(self, value: Any, position: int | None = None) -> Any:
        """Return the driver value for ``value``; ``None`` binds SQL NULL."""
        if value is None:
            return None
        try:
            return self.binder(self.column_type.coerce(value))
        except BindError as e:
            e.position = position
            raise

    @property
    def sql_type(self) -> SqlType:
        return self.column_type.sql_type


__all__ = [
    "SqlType",
    "ColumnType",
    "TypeTag",
    "lookup_by_sql_type_id",
    "infer_sql_type",
]
