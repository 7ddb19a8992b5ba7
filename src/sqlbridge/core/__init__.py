"""sqlbridge core -- typed statement execution and dialect abstraction.

Manifesto:
    Applications that persist the same logical model on several engines
    keep re-solving the same problems: how to bind a boolean on an engine
    without one, how to declare an auto-generated id, how to get that id
    back after the INSERT, how to tell "no row" from "two rows". Without a
    shared layer every call site carries its own engine switch.

    ``sqlbridge.core`` answers those questions once, behind a small API:
    callers write complete SQL plus parallel typed arguments, and get back
    row counts, integer keys and single-row outcomes.

    - **Sync DB-API only:** works with any PEP 249 driver
    - **Protocol-first:** DataSource, Dialect, DbApiConnection are protocols
    - **Import-guarded drivers:** psycopg2, mysql.connector, ibm_db, oracledb
      load on first connection

Architecture::

    Layer 1 -- Types & Errors
        errors.py          Structured error hierarchy (SqlBridgeError)
        enums.py           DatabaseType, KeyRetrieval, ParamStyle
        types.py           SqlType / ColumnType registry + TypeTag binding
        columns.py         LogicalColumn + ColumnDefinition
        result.py          OneResult (NoRows / Exactly / MoreThanOne)
        protocols.py       DbApiCursor, DbApiConnection, DataSource

    Layer 2 -- Dialects
        dialect.py         Dialect protocol + 5 engines + registry

    Layer 3 -- Execution
        cursor.py          RowCursor typed row access
        keys.py            GeneratedKeyHolder
        access.py          DatabaseAccess executor
        adapters/          Data sources (SQLite -> Oracle)

    Layer 4 -- Cross-Cutting Concerns
        logging.py         structlog configuration
        settings.py        BridgeSettings (pydantic-settings)

Tags:
    sqlbridge, database, dialect, dbapi, generated-keys, core
"""

from sqlbridge.core.access import DatabaseAccess
from sqlbridge.core.adapters import (
    BaseDataSource,
    DatabaseConfig,
    DB2DataSource,
    MySQLDataSource,
    OracleDataSource,
    PostgreSQLDataSource,
    SQLiteDataSource,
    data_source_from_config,
    get_data_source,
)
from sqlbridge.core.columns import ColumnDefinition, LogicalColumn
from sqlbridge.core.cursor import RowCursor
from sqlbridge.core.dialect import (
    BaseDialect,
    DB2Dialect,
    Dialect,
    MySQLDialect,
    OracleDialect,
    PostgreSQLDialect,
    RawKey,
    SQLiteDialect,
    StatementHandle,
    dialect_for_connection,
    dialect_for_url,
    get_dialect,
    list_dialects,
    register_dialect,
)
from sqlbridge.core.enums import DatabaseType, KeyRetrieval, ParamStyle
from sqlbridge.core.errors import (
    AmbiguousResultError,
    BindError,
    ConfigError,
    CursorClosedError,
    DatabaseConnectionError,
    ErrorCategory,
    ExecutionError,
    InvalidKeyTypeError,
    NoGeneratedKeysError,
    NoResultError,
    SchemaError,
    SqlBridgeError,
    TypeMismatchError,
    UnknownTypeError,
    UnsupportedFeatureError,
)
from sqlbridge.core.keys import GeneratedKeyHolder
from sqlbridge.core.protocols import DataSource
from sqlbridge.core.result import Exactly, MoreThanOne, NoRows, OneResult
from sqlbridge.core.types import ColumnType, SqlType, TypeTag, lookup_by_sql_type_id

__all__ = [
    # Execution
    "DatabaseAccess",
    "GeneratedKeyHolder",
    "RowCursor",
    "OneResult",
    "NoRows",
    "Exactly",
    "MoreThanOne",
    # Types
    "SqlType",
    "ColumnType",
    "TypeTag",
    "lookup_by_sql_type_id",
    "LogicalColumn",
    "ColumnDefinition",
    "DatabaseType",
    "KeyRetrieval",
    "ParamStyle",
    # Dialects
    "Dialect",
    "BaseDialect",
    "SQLiteDialect",
    "PostgreSQLDialect",
    "MySQLDialect",
    "DB2Dialect",
    "OracleDialect",
    "RawKey",
    "StatementHandle",
    "get_dialect",
    "register_dialect",
    "list_dialects",
    "dialect_for_url",
    "dialect_for_connection",
    # Data sources
    "DataSource",
    "BaseDataSource",
    "DatabaseConfig",
    "SQLiteDataSource",
    "PostgreSQLDataSource",
    "MySQLDataSource",
    "DB2DataSource",
    "OracleDataSource",
    "get_data_source",
    "data_source_from_config",
    # Errors
    "ErrorCategory",
    "SqlBridgeError",
    "BindError",
    "ExecutionError",
    "NoGeneratedKeysError",
    "InvalidKeyTypeError",
    "UnknownTypeError",
    "NoResultError",
    "AmbiguousResultError",
    "TypeMismatchError",
    "CursorClosedError",
    "SchemaError",
    "UnsupportedFeatureError",
    "ConfigError",
    "DatabaseConnectionError",
]
