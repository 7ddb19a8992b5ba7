"""
Shared enums for sqlbridge.

Used by the dialects, the data sources and the settings layer. Import from
here to keep those modules independent of each other.

STDLIB ONLY - NO PYDANTIC.
"""

from enum import Enum


class DatabaseType(str, Enum):
    """Supported database engines."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    DB2 = "db2"
    ORACLE = "oracle"


class KeyRetrieval(str, Enum):
    """
    How an engine hands back keys generated by an INSERT.

    CURSOR_ATTRIBUTE: read ``cursor.lastrowid`` after the statement
    RETURNING: read the result set produced by an appended ``RETURNING`` clause
    FOLLOW_UP_QUERY: run a session-scoped query on the same connection
    """

    CURSOR_ATTRIBUTE = "cursor_attribute"
    RETURNING = "returning"
    FOLLOW_UP_QUERY = "follow_up_query"


class ParamStyle(str, Enum):
    """DB-API ``paramstyle`` values used by the supported drivers."""

    QMARK = "qmark"        # ?
    FORMAT = "format"      # %s
    NUMERIC = "numeric"    # :1


__all__ = [
    "DatabaseType",
    "KeyRetrieval",
    "ParamStyle",
]
