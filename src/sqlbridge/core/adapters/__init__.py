"""Data sources -- one connection supplier per supported engine.

Manifesto:
    The access layer must run identically on SQLite (tests, development),
    PostgreSQL and MySQL (services), and DB2 or Oracle (enterprise). Each
    data source hides how its driver hands out connections, pooled or not,
    behind the same three calls.

    Each data source is **import-guarded**: the database driver is only
    required on first connection, not at import time. Install the
    corresponding extra::

        pip install sqlbridge[postgresql]   # psycopg2-binary
        pip install sqlbridge[db2]          # ibm-db
        pip install sqlbridge[mysql]        # mysql-connector-python
        pip install sqlbridge[oracle]       # oracledb

Architecture::

    BaseDataSource (base.py)            get_connection / release_connection / close
        |-- SQLiteDataSource            stdlib sqlite3 (always available)
        |-- PostgreSQLDataSource        psycopg2 ThreadedConnectionPool
        |-- DB2DataSource               ibm_db_dbi
        |-- MySQLDataSource             mysql.connector pooling
        |-- OracleDataSource            oracledb pool

    DataSourceRegistry (registry.py)    Singleton: DatabaseType -> data source class
    DatabaseConfig (types.py)           Connection parameters

Guardrails:
    ❌ Importing optional drivers at module scope
    ✅ Import-guarded on first use with clear ``ConfigError``
    ❌ ``source = PostgreSQLDataSource(...)`` scattered through app code
    ✅ ``source = data_source_from_settings(BridgeSettings())``

Tags:
    sqlbridge, database, data-source, multi-backend, import-guarded,
    registry-pattern, postgresql, sqlite, db2, mysql, oracle
"""

from sqlbridge.core.enums import DatabaseType
from sqlbridge.core.protocols import DataSource

from .base import BaseDataSource
from .db2 import DB2DataSource
from .mysql import MySQLDataSource
from .oracle import OracleDataSource
from .postgresql import PostgreSQLDataSource
from .registry import (
    DataSourceRegistry,
    data_source_from_config,
    data_source_from_settings,
    data_source_registry,
    get_data_source,
)
from .sqlite import SQLiteDataSource
from .types import DatabaseConfig

__all__ = [
    # Types
    "DatabaseType",
    "DatabaseConfig",
    # Protocol / base class
    "DataSource",
    "BaseDataSource",
    # Implementations
    "SQLiteDataSource",
    "PostgreSQLDataSource",
    "DB2DataSource",
    "MySQLDataSource",
    "OracleDataSource",
    # Registry
    "DataSourceRegistry",
    "data_source_registry",
    "get_data_source",
    "data_source_from_config",
    "data_source_from_settings",
]
