"""SQL dialect descriptors for engine-portable data access.

Provides a ``Dialect`` protocol and one implementation per supported engine.
A dialect decides how a ``LogicalColumn`` is rendered into that engine's DDL
(type keyword, identity clause, nullability, default, primary key
constraint), how statement arguments are bound, and how keys generated by an
INSERT are read back.

Manifesto:
    One logical data model has to run on engines that disagree about almost
    everything: identity syntax, boolean storage, LIMIT support, quoting and
    how generated keys come back. Each engine's rules live in one small class
    so they stay local and testable.

    - **One interface:** Dialect protocol for all rendering and key retrieval
    - **Shallow hierarchy:** BaseDialect plus one class per engine
    - **Explicit selection:** get_dialect() returns a value the caller passes
      to DatabaseAccess; there is no process-wide "current dialect"
    - **Stateless:** dialects are immutable singletons, safe to share

Architecture::

    ┌──────────────────────────────────────────────────────────────────┐
    │                     Dialect Descriptor Layer                      │
    └──────────────────────────────────────────────────────────────────┘

    LogicalColumn ──► render_column_definition() ──► ColumnDefinition
                                                     (fragment, before, constraints)

    ┌──────────┐ ┌──────────────┐ ┌──────────┐ ┌────────────┐ ┌──────────────┐
    │ SQLite   │ │ PostgreSQL   │ │  MySQL   │ │    DB2     │ │   Oracle     │
    │ INTEGER  │ │ GENERATED BY │ │ AUTO_    │ │ GENERATED  │ │ CREATE       │
    │ AUTO-    │ │ DEFAULT AS   │ │ INCREMENT│ │ BY DEFAULT │ │ SEQUENCE +   │
    │ INCREMENT│ │ IDENTITY     │ │          │ │ AS IDENTITY│ │ NEXTVAL      │
    │ lastrowid│ │ RETURNING    │ │ lastrowid│ │ IDENTITY_  │ │ seq.CURRVAL  │
    │          │ │              │ │          │ │ VAL_LOCAL()│ │              │
    └──────────┘ └──────────────┘ └──────────┘ └────────────┘ └──────────────┘

Examples:
    >>> from sqlbridge.core.dialect import get_dialect
    >>> from sqlbridge.core.columns import LogicalColumn
    >>> d = get_dialect("postgresql")
    >>> d.render_column_definition(LogicalColumn.generated_id()).fragment
    '"id" BIGINT NOT NULL GENERATED BY DEFAULT AS IDENTITY'
    >>> d.is_limit_supported()
    True

Guardrails:
    ❌ DON'T: Hard-code identity syntax or boolean literals in callers
    ✅ DO: Ask the dialect (render_column_definition, boolean_true)

    ❌ DON'T: Keep a global "current dialect"
    ✅ DO: Pass the dialect explicitly to DatabaseAccess

Tags:
    dialect, sql, ddl, identity, generated-keys, portability, sqlbridge
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, NamedTuple, Protocol, runtime_checkable

from sqlbridge.core.columns import ColumnDefinition, LogicalColumn
from sqlbridge.core.cursor import RowCursor
from sqlbridge.core.enums import DatabaseType, KeyRetrieval, ParamStyle
from sqlbridge.core.errors import ConfigError, SchemaError, UnsupportedFeatureError
from sqlbridge.core.types import ColumnType, SqlType, TypeTag, infer_sql_type


class RawKey(NamedTuple):
    """One generated key as reported by the engine, before conversion."""

    column_name: str
    raw_value: Any
    sql_type_id: int


@dataclass(frozen=True)
class StatementHandle:
    """Everything a dialect needs to read back generated keys.

    ``cursor`` is the cursor that executed the INSERT; ``connection`` is the
    same session, for follow-up queries.
    """

    connection: Any
    cursor: Any
    sql: str
    key_columns: tuple[str, ...]
    table: str | None = None


@runtime_checkable
class Dialect(Protocol):
    """SQL dialect contract.

    Rendering methods return **SQL fragments** valid for the target engine.
    """

    @property
    def name(self) -> str:
        """Human-readable dialect name (e.g. ``'sqlite'``)."""
        ...

    @property
    def database_type(self) -> DatabaseType:
        ...

    @property
    def driver_name(self) -> str:
        """DB-API driver module used for this engine (e.g. ``'psycopg2'``)."""
        ...

    @property
    def native_boolean(self) -> bool:
        ...

    @property
    def key_retrieval(self) -> KeyRetrieval:
        ...

    @property
    def ping_statement(self) -> str:
        ...

    # -- Capabilities ------------------------------------------------------

    def is_limit_supported(self) -> bool:
        """Whether ``LIMIT``/``OFFSET`` can be appended to a SELECT."""
        ...

    def render_limit(self, limit: int, offset: int | None = None) -> str:
        ...

    # -- Quoting / placeholders ---------------------------------------------

    def quote_identifier(self, name: str) -> str:
        """Wrap ``name`` in the engine's identifier quote. Idempotent."""
        ...

    def unquote_identifier(self, name: str) -> str:
        ...

    def quote_literal(self, text: str) -> str:
        ...

    def placeholder(self, index: int) -> str:
        """Single positional placeholder (0-based index)."""
        ...

    def placeholders(self, count: int) -> str:
        ...

    def boolean_true(self) -> str:
        ...

    def boolean_false(self) -> str:
        ...

    # -- Types -------------------------------------------------------------

    def type_name(self, column: LogicalColumn) -> str:
        ...

    def type_tag(self, column_type: ColumnType) -> TypeTag:
        """Type tag binding arguments of ``column_type`` for this engine."""
        ...

    def type_code_to_sql_type(self, type_code: Any) -> SqlType | None:
        """Translate a ``cursor.description`` type code, ``None`` if unknown."""
        ...

    # -- DDL ---------------------------------------------------------------

    def render_column_definition(
        self, column: LogicalColumn, *, table: str | None = None
    ) -> ColumnDefinition:
        ...

    def render_create_table(self, table: str, columns: Sequence[LogicalColumn]) -> list[str]:
        ...

    def render_drop_table(self, table: str, columns: Sequence[LogicalColumn] = ()) -> list[str]:
        ...

    def sequence_name(self, table: str, column: str) -> str:
        ...

    # -- Generated keys ----------------------------------------------------

    def prepare_insert(self, sql: str, key_columns: Sequence[str]) -> str:
        """Adapt an INSERT so the engine reports generated keys."""
        ...

    def extract_generated_keys(self, handle: StatementHandle) -> list[RawKey]:
        """Read generated keys after the INSERT; zero keys is a valid result."""
        ...


# =========================================================================
# Shared implementation
# =========================================================================


def _iso_timestamp(value: datetime) -> str:
    return value.isoformat(sep=" ")


class BaseDialect:
    """Behavior shared by every engine; subclasses override class attributes.

    ``type_names`` maps each column type to a template that may use
    ``{width}``, ``{precision}`` and ``{scale}``.
    """

    name: str = "generic"
    database_type: DatabaseType
    driver_name: str = ""
    paramstyle: ParamStyle = ParamStyle.QMARK
    quote_char: str = '"'
    native_boolean: bool = True
    limit_supported: bool = True
    key_retrieval: KeyRetrieval = KeyRetrieval.CURSOR_ATTRIBUTE
    ping_statement: str = "SELECT 1"
    default_string_width: int = 255
    default_precision: int = 19
    default_scale: int = 4
    identity_clause: str = ""
    # lastrowid values that mean "nothing was generated"
    empty_lastrowid: tuple[Any, ...] = (None,)
    type_names: dict[ColumnType, str] = {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    # -- Capabilities ------------------------------------------------------

    def is_limit_supported(self) -> bool:
        return self.limit_supported

    def render_limit(self, limit: int, offset: int | None = None) -> str:
        if not self.limit_supported:
            raise UnsupportedFeatureError(
                f"{self.name} does not support LIMIT; paginate on the caller side"
            ).with_context(dialect=self.name)
        if limit < 0 or (offset is not None and offset < 0):
            raise ValueError("limit and offset must be non-negative")
        clause = f"LIMIT {limit}"
        if offset:
            clause += f" OFFSET {offset}"
        return clause

    # -- Quoting -----------------------------------------------------------

    def _is_quoted(self, name: str) -> bool:
        q = self.quote_char
        if len(name) < 2 or not (name.startswith(q) and name.endswith(q)):
            return False
        # every quote inside must be escaped by doubling
        return q not in name[1:-1].replace(q + q, "")

    def quote_identifier(self, name: str) -> str:
        if self._is_quoted(name):
            return name
        q = self.quote_char
        return f"{q}{name.replace(q, q + q)}{q}"

    def unquote_identifier(self, name: str) -> str:
        if not self._is_quoted(name):
            return name
        q = self.quote_char
        return name[1:-1].replace(q + q, q)

    def quote_literal(self, text: str) -> str:
        return "'" + text.replace("'", "''") + "'"

    # -- Placeholders ------------------------------------------------------

    def placeholder(self, index: int) -> str:
        match self.paramstyle:
            case ParamStyle.QMARK:
                return "?"
            case ParamStyle.FORMAT:
                return "%s"
            case ParamStyle.NUMERIC:
                return f":{index + 1}"
        raise ConfigError(f"Unsupported paramstyle: {self.paramstyle}")  # pragma: no cover

    def placeholders(self, count: int) -> str:
        return ", ".join(self.placeholder(i) for i in range(count))

    # -- Literals ----------------------------------------------------------

    def boolean_true(self) -> str:
        return "TRUE" if self.native_boolean else "1"

    def boolean_false(self) -> str:
        return "FALSE" if self.native_boolean else "0"

    def render_literal(self, value: Any) -> str:
        """Render a Python value as a SQL literal for DEFAULT clauses."""
        if value is None:
            return "NULL"
        if isinstance(value, bool):
            return self.boolean_true() if value else self.boolean_false()
        if isinstance(value, (int, float, Decimal)):
            return str(value)
        if isinstance(value, datetime):
            return self.quote_literal(_iso_timestamp(value))
        if isinstance(value, str):
            return self.quote_literal(value)
        raise SchemaError(f"Cannot render {type(value).__name__} as a DEFAULT literal")

    # -- Types -------------------------------------------------------------

    def type_name(self, column: LogicalColumn) -> str:
        try:
            template = self.type_names[column.column_type]
        except KeyError:
            raise SchemaError(
                f"{self.name} has no type for {column.column_type.label}"
            ).with_context(dialect=self.name, column=column.name) from None
        return template.format(
            width=column.width or self.default_string_width,
            precision=column.width or self.default_precision,
            scale=column.scale if column.scale is not None else self.default_scale,
        )

    def identity_type_name(self, column: LogicalColumn) -> str:
        """Type keyword for a generated id column."""
        return self.type_name(column)

    def bind_adapter(self, column_type: ColumnType) -> Callable[[Any], Any] | None:
        """Driver-level conversion applied after coercion, ``None`` for pass-through."""
        if column_type is ColumnType.BOOLEAN and not self.native_boolean:
            return int
        if column_type is ColumnType.UUID:
            return str
        return None

    def type_tag(self, column_type: ColumnType) -> TypeTag:
        adapter = self.bind_adapter(column_type)
        if adapter is None:
            return TypeTag(column_type, self.name)
        return TypeTag(column_type, self.name, adapter)

    def type_code_to_sql_type(self, type_code: Any) -> SqlType | None:
        return None

    # -- DDL ---------------------------------------------------------------

    def render_identity(self, column: LogicalColumn, table: str | None) -> tuple[str, list[str]]:
        """Identity clause and companion statements for a generated id."""
        return self.identity_clause, []

    def render_column_definition(
        self, column: LogicalColumn, *, table: str | None = None
    ) -> ColumnDefinition:
        parts = [self.quote_identifier(column.name)]
        statements_before: list[str] = []
        identity = ""

        if column.is_generated_id:
            parts.append(self.identity_type_name(column))
            identity, statements_before = self.render_identity(column, table)
        else:
            parts.append(self.type_name(column))
            if column.default is not None:
                parts.append(f"DEFAULT {self.render_literal(column.default)}")

        if not column.nullable or column.is_primary_key:
            parts.append("NOT NULL")
        if identity:
            parts.append(identity)

        constraints = []
        if column.is_primary_key:
            constraints.append(f"PRIMARY KEY ({self.quote_identifier(column.name)})")

        return ColumnDefinition(" ".join(parts), statements_before, constraints)

    def render_create_table(self, table: str, columns: Sequence[LogicalColumn]) -> list[str]:
        """Statements creating ``table``: companion statements first, CREATE TABLE last."""
        if not columns:
            raise SchemaError(f"Table {table!r} has no columns")
        primary_keys = [c.name for c in columns if c.is_primary_key]
        if len(primary_keys) > 1:
            raise SchemaError(
                f"Table {table!r} declares more than one primary key: {primary_keys}"
            )

        before: list[str] = []
        fragments: list[str] = []
        constraints: list[str] = []
        for column in columns:
            definition = self.render_column_definition(column, table=table)
            before.extend(definition.statements_before)
            fragments.append(definition.fragment)
            constraints.extend(definition.constraints)

        body = ", ".join(fragments + constraints)
        return before + [f"CREATE TABLE {self.quote_identifier(table)} ({body})"]

    def render_drop_table(self, table: str, columns: Sequence[LogicalColumn] = ()) -> list[str]:
        """DROP TABLE followed by drops of companion objects."""
        return [f"DROP TABLE {self.quote_identifier(table)}"]

    def sequence_name(self, table: str, column: str) -> str:
        return f"{table}_{column}_seq"

    # -- Generated keys ----------------------------------------------------

    def prepare_insert(self, sql: str, key_columns: Sequence[str]) -> str:
        if self.key_retrieval is KeyRetrieval.RETURNING and key_columns:
            returning = ", ".join(self.quote_identifier(c) for c in key_columns)
            return f"{sql.rstrip().rstrip(';')} RETURNING {returning}"
        return sql

    def generated_key_query(self, handle: StatementHandle) -> str:
        """Session-scoped query returning the last generated key."""
        raise UnsupportedFeatureError(
            f"{self.name} has no follow-up key query"
        ).with_context(dialect=self.name)

    def extract_generated_keys(self, handle: StatementHandle) -> list[RawKey]:
        match self.key_retrieval:
            case KeyRetrieval.CURSOR_ATTRIBUTE:
                return self._keys_from_lastrowid(handle)
            case KeyRetrieval.RETURNING:
                return self._keys_from_rows(RowCursor(handle.cursor, self), None)
            case KeyRetrieval.FOLLOW_UP_QUERY:
                return self._keys_from_follow_up(handle)
        raise ConfigError(f"Unknown key retrieval {self.key_retrieval}")  # pragma: no cover

    def _keys_from_lastrowid(self, handle: StatementHandle) -> list[RawKey]:
        value = getattr(handle.cursor, "lastrowid", None)
        if value in self.empty_lastrowid or not handle.key_columns:
            return []
        return [RawKey(handle.key_columns[0], value, int(infer_sql_type(value)))]

    def _keys_from_follow_up(self, handle: StatementHandle) -> list[RawKey]:
        if not handle.key_columns:
            return []
        sql = self.generated_key_query(handle)
        follow_up = handle.connection.cursor()
        try:
            follow_up.execute(sql)
            keys = self._keys_from_rows(RowCursor(follow_up, self), handle.key_columns[:1])
        finally:
            follow_up.close()
        return keys[:1]

    def _keys_from_rows(
        self, rows: RowCursor, names: Iterable[str] | None
    ) -> list[RawKey]:
        names = list(names) if names is not None else None
        keys: list[RawKey] = []
        while rows.advance():
            for i in range(rows.column_count):
                column = names[i] if names is not None and i < len(names) else rows.column_name(i)
                keys.append(RawKey(column, rows.get_object(i), int(rows.column_type_id(i))))
        return keys


# =========================================================================
# Concrete Dialect Implementations
# =========================================================================


class SQLiteDialect(BaseDialect):
    """SQLite: ``?`` placeholders, rowid identity, ``cursor.lastrowid`` keys.

    A generated id is declared ``INTEGER`` with a table-level primary key,
    which makes it an alias of the rowid. Booleans are stored as 0/1.
    """

    name = "sqlite"
    database_type = DatabaseType.SQLITE
    driver_name = "sqlite3"
    paramstyle = ParamStyle.QMARK
    native_boolean = False
    key_retrieval = KeyRetrieval.CURSOR_ATTRIBUTE
    empty_lastrowid = (None, 0)
    type_names = {
        ColumnType.STRING: "VARCHAR({width})",
        ColumnType.LONG_STRING: "TEXT",
        ColumnType.CHAR: "CHAR(1)",
        ColumnType.BOOLEAN: "SMALLINT",
        ColumnType.DATE: "TIMESTAMP",
        ColumnType.BYTE: "TINYINT",
        ColumnType.SHORT: "SMALLINT",
        ColumnType.INTEGER: "INTEGER",
        ColumnType.LONG: "BIGINT",
        ColumnType.FLOAT: "REAL",
        ColumnType.DOUBLE: "DOUBLE PRECISION",
        ColumnType.DECIMAL: "NUMERIC({precision},{scale})",
        ColumnType.BYTES: "BLOB",
        ColumnType.UUID: "VARCHAR(48)",
    }

    def identity_type_name(self, column: LogicalColumn) -> str:
        # only the exact type name INTEGER aliases the rowid
        return "INTEGER"

    def render_column_definition(
        self, column: LogicalColumn, *, table: str | None = None
    ) -> ColumnDefinition:
        definition = super().render_column_definition(column, table=table)
        if not column.is_generated_id:
            return definition
        # AUTOINCREMENT is only accepted on an inline PRIMARY KEY
        return ColumnDefinition(
            f"{definition.fragment} PRIMARY KEY AUTOINCREMENT",
            definition.statements_before,
            [],
        )

    def bind_adapter(self, column_type: ColumnType) -> Callable[[Any], Any] | None:
        if column_type is ColumnType.DATE:
            return _iso_timestamp
        if column_type is ColumnType.DECIMAL:
            return str
        return super().bind_adapter(column_type)


# psycopg2 type OIDs
_PG_OIDS = {
    16: SqlType.BOOLEAN,
    17: SqlType.VARBINARY,
    18: SqlType.CHAR,
    20: SqlType.BIGINT,
    21: SqlType.SMALLINT,
    23: SqlType.INTEGER,
    25: SqlType.LONGVARCHAR,
    700: SqlType.REAL,
    701: SqlType.DOUBLE,
    1042: SqlType.CHAR,
    1043: SqlType.VARCHAR,
    1082: SqlType.DATE,
    1114: SqlType.TIMESTAMP,
    1184: SqlType.TIMESTAMP,
    1700: SqlType.NUMERIC,
    2950: SqlType.OTHER,
}


class PostgreSQLDialect(BaseDialect):
    """PostgreSQL: ``%s`` placeholders (psycopg2), identity columns, ``RETURNING`` keys."""

    name = "postgresql"
    database_type = DatabaseType.POSTGRESQL
    driver_name = "psycopg2"
    paramstyle = ParamStyle.FORMAT
    native_boolean = True
    key_retrieval = KeyRetrieval.RETURNING
    identity_clause = "GENERATED BY DEFAULT AS IDENTITY"
    type_names = {
        ColumnType.STRING: "VARCHAR({width})",
        ColumnType.LONG_STRING: "TEXT",
        ColumnType.CHAR: "CHAR(1)",
        ColumnType.BOOLEAN: "BOOLEAN",
        ColumnType.DATE: "TIMESTAMP",
        ColumnType.BYTE: "SMALLINT",
        ColumnType.SHORT: "SMALLINT",
        ColumnType.INTEGER: "INTEGER",
        ColumnType.LONG: "BIGINT",
        ColumnType.FLOAT: "REAL",
        ColumnType.DOUBLE: "DOUBLE PRECISION",
        ColumnType.DECIMAL: "NUMERIC({precision},{scale})",
        ColumnType.BYTES: "BYTEA",
        ColumnType.UUID: "UUID",
    }

    def type_code_to_sql_type(self, type_code: Any) -> SqlType | None:
        return _PG_OIDS.get(type_code) if isinstance(type_code, int) else None


# mysql.connector FieldType codes
_MYSQL_FIELD_TYPES = {
    0: SqlType.DECIMAL,
    1: SqlType.TINYINT,
    2: SqlType.SMALLINT,
    3: SqlType.INTEGER,
    4: SqlType.REAL,
    5: SqlType.DOUBLE,
    7: SqlType.TIMESTAMP,
    8: SqlType.BIGINT,
    9: SqlType.INTEGER,
    12: SqlType.TIMESTAMP,
    15: SqlType.VARCHAR,
    246: SqlType.DECIMAL,
    252: SqlType.BLOB,
    253: SqlType.VARCHAR,
    254: SqlType.CHAR,
}


class MySQLDialect(BaseDialect):
    """MySQL / MariaDB: ``%s`` placeholders, backtick quoting, ``AUTO_INCREMENT``.

    Compatible with ``mysql.connector``; keys come from ``cursor.lastrowid``,
    which reads 0 when the statement generated nothing.
    """

    name = "mysql"
    database_type = DatabaseType.MYSQL
    driver_name = "mysql.connector"
    paramstyle = ParamStyle.FORMAT
    quote_char = "`"
    native_boolean = False
    key_retrieval = KeyRetrieval.CURSOR_ATTRIBUTE
    identity_clause = "AUTO_INCREMENT"
    empty_lastrowid = (None, 0)
    type_names = {
        ColumnType.STRING: "VARCHAR({width})",
        ColumnType.LONG_STRING: "LONGTEXT",
        ColumnType.CHAR: "CHAR(1)",
        ColumnType.BOOLEAN: "TINYINT(1)",
        ColumnType.DATE: "DATETIME(6)",
        ColumnType.BYTE: "TINYINT",
        ColumnType.SHORT: "SMALLINT",
        ColumnType.INTEGER: "INT",
        ColumnType.LONG: "BIGINT",
        ColumnType.FLOAT: "FLOAT",
        ColumnType.DOUBLE: "DOUBLE",
        ColumnType.DECIMAL: "DECIMAL({precision},{scale})",
        ColumnType.BYTES: "BLOB",
        ColumnType.UUID: "VARCHAR(48)",
    }

    def quote_literal(self, text: str) -> str:
        # MySQL also treats backslash as an escape character
        return "'" + text.replace("\\", "\\\\").replace("'", "''") + "'"

    def type_code_to_sql_type(self, type_code: Any) -> SqlType | None:
        return _MYSQL_FIELD_TYPES.get(type_code) if isinstance(type_code, int) else None


class DB2Dialect(BaseDialect):
    """IBM DB2: ``?`` placeholders (ibm_db_dbi), identity columns, no LIMIT.

    Keys are read with ``IDENTITY_VAL_LOCAL()`` on the inserting session,
    which reports a DECIMAL.
    """

    name = "db2"
    database_type = DatabaseType.DB2
    driver_name = "ibm_db_dbi"
    paramstyle = ParamStyle.QMARK
    native_boolean = False
    limit_supported = False
    key_retrieval = KeyRetrieval.FOLLOW_UP_QUERY
    ping_statement = "VALUES 1"
    identity_clause = "GENERATED BY DEFAULT AS IDENTITY"
    type_names = {
        ColumnType.STRING: "VARCHAR({width})",
        ColumnType.LONG_STRING: "CLOB",
        ColumnType.CHAR: "CHAR(1)",
        ColumnType.BOOLEAN: "SMALLINT",
        ColumnType.DATE: "TIMESTAMP",
        ColumnType.BYTE: "SMALLINT",
        ColumnType.SHORT: "SMALLINT",
        ColumnType.INTEGER: "INTEGER",
        ColumnType.LONG: "BIGINT",
        ColumnType.FLOAT: "REAL",
        ColumnType.DOUBLE: "DOUBLE",
        ColumnType.DECIMAL: "DECIMAL({precision},{scale})",
        ColumnType.BYTES: "BLOB",
        ColumnType.UUID: "VARCHAR(48)",
    }

    def generated_key_query(self, handle: StatementHandle) -> str:
        return "SELECT IDENTITY_VAL_LOCAL() FROM SYSIBM.SYSDUMMY1"


class OracleDialect(BaseDialect):
    """Oracle: ``:1, :2`` numbered placeholders, sequence-backed ids, no LIMIT.

    A generated id needs a ``CREATE SEQUENCE`` before the table and a
    ``DEFAULT seq.NEXTVAL`` on the column; the key is read back with
    ``seq.CURRVAL`` on the same session, so the key holder must name the
    table.
    """

    name = "oracle"
    database_type = DatabaseType.ORACLE
    driver_name = "oracledb"
    paramstyle = ParamStyle.NUMERIC
    native_boolean = False
    limit_supported = False
    key_retrieval = KeyRetrieval.FOLLOW_UP_QUERY
    ping_statement = "SELECT 1 FROM DUAL"
    type_names = {
        ColumnType.STRING: "VARCHAR2({width})",
        ColumnType.LONG_STRING: "CLOB",
        ColumnType.CHAR: "CHAR(1)",
        ColumnType.BOOLEAN: "SMALLINT",
        ColumnType.DATE: "TIMESTAMP",
        ColumnType.BYTE: "NUMBER(3)",
        ColumnType.SHORT: "NUMBER(5)",
        ColumnType.INTEGER: "NUMBER(10)",
        ColumnType.LONG: "NUMBER(19)",
        ColumnType.FLOAT: "BINARY_FLOAT",
        ColumnType.DOUBLE: "BINARY_DOUBLE",
        ColumnType.DECIMAL: "NUMBER({precision},{scale})",
        ColumnType.BYTES: "BLOB",
        ColumnType.UUID: "VARCHAR2(48)",
    }

    def _sequence_for(self, table: str | None, column: str) -> str:
        if not table:
            raise ConfigError(
                f"Oracle generated id {column!r} needs the table name to derive its sequence"
            ).with_context(dialect=self.name, column=column)
        return self.quote_identifier(self.sequence_name(table, column))

    def render_identity(self, column: LogicalColumn, table: str | None) -> tuple[str, list[str]]:
        sequence = self._sequence_for(table, column.name)
        return f"DEFAULT {sequence}.NEXTVAL", [f"CREATE SEQUENCE {sequence}"]

    def render_column_definition(
        self, column: LogicalColumn, *, table: str | None = None
    ) -> ColumnDefinition:
        definition = super().render_column_definition(column, table=table)
        if not column.is_generated_id:
            return definition
        # DEFAULT must precede NOT NULL in Oracle column syntax
        identity, _ = self.render_identity(column, table)
        fragment = definition.fragment.replace(f" NOT NULL {identity}", f" {identity} NOT NULL")
        return definition._replace(fragment=fragment)

    def render_drop_table(self, table: str, columns: Sequence[LogicalColumn] = ()) -> list[str]:
        statements = super().render_drop_table(table, columns)
        for column in columns:
            if column.is_generated_id:
                statements.append(f"DROP SEQUENCE {self._sequence_for(table, column.name)}")
        return statements

    def generated_key_query(self, handle: StatementHandle) -> str:
        sequence = self._sequence_for(handle.table, handle.key_columns[0])
        return f"SELECT {sequence}.CURRVAL FROM DUAL"


# =========================================================================
# Registry / Factory
# =========================================================================

# Pre-instantiated singletons (dialects are stateless)
_DIALECTS: dict[str, Dialect] = {
    "sqlite": SQLiteDialect(),
    "postgresql": PostgreSQLDialect(),
    "postgres": PostgreSQLDialect(),  # alias
    "mysql": MySQLDialect(),
    "mariadb": MySQLDialect(),  # alias
    "db2": DB2Dialect(),
    "oracle": OracleDialect(),
}

# Root module of a DB-API connection class -> dialect key
_DRIVER_MODULES = {
    "sqlite3": "sqlite",
    "_sqlite3": "sqlite",
    "psycopg2": "postgresql",
    "psycopg": "postgresql",
    "mysql": "mysql",
    "pymysql": "mysql",
    "ibm_db_dbi": "db2",
    "ibm_db": "db2",
    "oracledb": "oracle",
    "cx_Oracle": "oracle",
}

_ALIASES = {"postgres", "mariadb"}


def get_dialect(db_type: DatabaseType | str) -> Dialect:
    """Get a dialect by database type.

    Args:
        db_type: A ``DatabaseType`` or one of ``'sqlite'``, ``'postgresql'``,
                 ``'postgres'``, ``'mysql'``, ``'mariadb'``, ``'db2'``,
                 ``'oracle'`` or a name added with ``register_dialect``.

    Raises:
        ConfigError: If ``db_type`` is not recognised.

    Example:
        >>> get_dialect("postgresql").placeholders(2)
        '%s, %s'
    """
    key = db_type.value if isinstance(db_type, DatabaseType) else db_type.lower()
    if key not in _DIALECTS:
        raise ConfigError(
            f"Unknown dialect '{db_type}'. Supported: {list_dialects()}"
        )
    return _DIALECTS[key]


def register_dialect(name: str, dialect: Dialect) -> None:
    """Register a custom dialect implementation.

    Useful for third-party drivers or test doubles.
    """
    _DIALECTS[name.lower()] = dialect


def list_dialects() -> list[str]:
    """Registered dialect names, aliases excluded."""
    return sorted(set(_DIALECTS) - _ALIASES)


def dialect_for_url(url: str) -> Dialect:
    """Select the dialect from a database URL.

    Accepts ``scheme://...`` (with an optional ``+driver`` suffix), bare
    ``sqlite:`` URLs and SQLite file paths.

    Example:
        >>> dialect_for_url("postgresql+psycopg2://user@host/db").name
        'postgresql'
    """
    if "://" in url or url.startswith("sqlite:"):
        scheme = url.split(":", 1)[0].split("+", 1)[0].lower()
        if scheme == "ibm_db":
            scheme = "db2"
        return get_dialect(scheme)
    if url == ":memory:" or url.endswith((".db", ".sqlite", ".sqlite3")):
        return get_dialect(DatabaseType.SQLITE)
    raise ConfigError(f"Cannot determine database type from URL: {url!r}")


def dialect_for_connection(conn: Any) -> Dialect:
    """Select the dialect from a live DB-API connection's driver module."""
    module = type(conn).__module__.split(".", 1)[0]
    try:
        return get_dialect(_DRIVER_MODULES[module])
    except KeyError:
        raise ConfigError(
            f"Cannot determine dialect for connection type {type(conn).__qualname__} "
            f"from module {module!r}"
        ) from None


__all__ = [
    # Protocol
    "Dialect",
    "BaseDialect",
    "RawKey",
    "StatementHandle",
    # Implementations
    "SQLiteDialect",
    "PostgreSQLDialect",
    "MySQLDialect",
    "DB2Dialect",
    "OracleDialect",
    # Factory
    "get_dialect",
    "register_dialect",
    "list_dialects",
    "dialect_for_url",
    "dialect_for_connection",
]
