"""
Statement executor and single-row query helper.

``DatabaseAccess`` runs complete, parameterized SQL statements against a
data source, binding arguments strictly by position through per-argument
type tags, and reports generated keys and single-row results in
engine-neutral form.

Manifesto:
    Every call is one short unit of work: borrow a connection, open one
    cursor, run one statement, commit or roll back, give everything back.
    Nothing is cached between calls, so one ``DatabaseAccess`` may be
    shared by any number of threads as long as its data source is.

    - **Positional binding:** argument ``i`` is bound with type tag ``i``;
      a length mismatch fails before a connection is borrowed
    - **Explicit dialect:** the dialect is a value held by the instance
    - **Typed failures:** driver errors become ``ExecutionError``; key and
      cardinality problems have their own error types
    - **Guaranteed release:** cursor and connection are released on every
      exit path, and a failing release never hides the original error

Architecture::

    execute / insert_returning_keys / query_for_one / query_for_long / query_iter
        │
        ├── _bind()          len(args) == len(tags), TypeTag.bind(value)
        │
        └── _session()       ExitStack: connection ─► cursor
              │                 commit on success, rollback on failure
              │
              ├── dialect.prepare_insert()          (RETURNING clause)
              ├── dialect.extract_generated_keys()  (lastrowid / rows / follow-up)
              ├── lookup_by_sql_type_id() + to_numeric_key()
              └── RowCursor + row mapper            (NoRows | Exactly | MoreThanOne)

Examples:
    >>> from sqlbridge.core.access import DatabaseAccess
    >>> from sqlbridge.core.adapters import SQLiteDataSource
    >>> from sqlbridge.core.types import ColumnType
    >>> access = DatabaseAccess(SQLiteDataSource())
    >>> access.execute("CREATE TABLE t (id INTEGER PRIMARY KEY, name VARCHAR(20))")
    0
    >>> access.execute("INSERT INTO t (name) VALUES (?)", ["a"], [ColumnType.STRING])
    1
    >>> access.query_for_long("SELECT COUNT(*) FROM t")
    1

Guardrails:
    ❌ DON'T: Format values into SQL text
    ✅ DO: Pass args with matching type tags

    ❌ DON'T: Reuse a GeneratedKeyHolder across inserts
    ✅ DO: One holder per insert_returning_keys call

Tags:
    database, executor, generated-keys, query, dbapi, sqlbridge
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from contextlib import ExitStack, contextmanager
from typing import Any, TypeVar

from sqlbridge.core.columns import LogicalColumn
from sqlbridge.core.cursor import RowCursor
from sqlbridge.core.dialect import Dialect, RawKey, StatementHandle, get_dialect
from sqlbridge.core.errors import (
    AmbiguousResultError,
    BindError,
    ConfigError,
    DatabaseConnectionError,
    ExecutionError,
    NoGeneratedKeysError,
    NoResultError,
    SqlBridgeError,
)
from sqlbridge.core.keys import GeneratedKeyHolder
from sqlbridge.core.logging import get_logger
from sqlbridge.core.protocols import DataSource
from sqlbridge.core.result import Exactly, MoreThanOne, NoRows, OneResult
from sqlbridge.core.types import ColumnType, TypeTag, lookup_by_sql_type_id

logger = get_logger(__name__)

T = TypeVar("T")

RowMapper = Callable[[RowCursor], T]
TagLike = TypeTag | ColumnType


class DatabaseAccess:
    """
    Executes typed, parameterized statements through a ``DataSource``.

    Args:
        data_source: Supplier of connections.
        dialect: Engine dialect; defaults to the one registered for
            ``data_source.database_type``.
    """

    def __init__(self, data_source: DataSource, dialect: Dialect | None = None):
        self._data_source = data_source
        self._dialect = dialect if dialect is not None else get_dialect(data_source.database_type)

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    @property
    def data_source(self) -> DataSource:
        return self._data_source

    def __repr__(self) -> str:
        return f"DatabaseAccess(dialect={self._dialect.name!r})"

    # -- Binding -------------------------------------------------------------

    def _tag(self, tag: TagLike, position: int) -> TypeTag:
        if isinstance(tag, TypeTag):
            return tag
        if isinstance(tag, ColumnType):
            return self._dialect.type_tag(tag)
        raise BindError(
            f"Argument {position} has no usable type tag: {tag!r}", position=position
        )

    def _bind(self, sql: str, args: Sequence[Any], type_tags: Sequence[TagLike]) -> list[Any]:
        args = list(args)
        type_tags = list(type_tags)
        if len(args) != len(type_tags):
            raise BindError(
                f"Got {len(args)} arguments but {len(type_tags)} type tags"
            ).with_context(sql=sql, dialect=self._dialect.name)
        try:
            return [
                self._tag(tag, i).bind(value, position=i)
                for i, (value, tag) in enumerate(zip(args, type_tags))
            ]
        except BindError as e:
            raise e.with_context(sql=sql, dialect=self._dialect.name)

    # -- Resource handling -----------------------------------------------------

    def _acquire(self) -> Any:
        try:
            return self._data_source.get_connection()
        except SqlBridgeError:
            raise
        except Exception as e:
            raise DatabaseConnectionError(
                f"Could not get a connection: {e}", cause=e
            ).with_context(dialect=self._dialect.name) from e

    def _release(self, conn: Any) -> None:
        try:
            self._data_source.release_connection(conn)
        except Exception as e:
            logger.warning(
                "connection.release_failed",
                dialect=self._dialect.name,
                error_type=type(e).__name__,
                error=str(e),
            )

    def _close_cursor(self, cursor: Any) -> None:
        try:
            cursor.close()
        except Exception as e:
            logger.warning(
                "cursor.close_failed",
                dialect=self._dialect.name,
                error_type=type(e).__name__,
                error=str(e),
            )

    def _rollback(self, conn: Any) -> None:
        try:
            conn.rollback()
        except Exception as e:
            logger.warning(
                "connection.rollback_failed",
                dialect=self._dialect.name,
                error_type=type(e).__name__,
                error=str(e),
            )

    def _driver_call(self, sql: str, action: str, call: Callable[[], T]) -> T:
        """Run one driver call, wrapping driver exceptions in ``ExecutionError``."""
        try:
            return call()
        except SqlBridgeError:
            raise
        except Exception as e:
            raise ExecutionError(
                f"{action} failed on {self._dialect.name}: {e}", cause=e
            ).with_context(sql=sql, dialect=self._dialect.name) from e

    @contextmanager
    def _session(self, sql: str) -> Iterator[tuple[Any, Any]]:
        """Borrow a connection and one cursor; commit on success, roll back on failure."""
        with ExitStack() as stack:
            conn = self._acquire()
            stack.callback(self._release, conn)
            try:
                cursor = self._driver_call(sql, "Opening cursor", conn.cursor)
                stack.callback(self._close_cursor, cursor)
                yield conn, cursor
                self._driver_call(sql, "Commit", conn.commit)
            except GeneratorExit:
                # a streaming caller stopped early
                self._rollback(conn)
                raise
            except Exception as e:
                self._rollback(conn)
                if isinstance(e, SqlBridgeError) and e.context.sql is None:
                    e.with_context(sql=sql)
                logger.warning(
                    "statement.failed",
                    dialect=self._dialect.name,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                raise

    def _run(self, cursor: Any, sql: str, params: list[Any]) -> None:
        if params:
            self._driver_call(sql, "Statement", lambda: cursor.execute(sql, params))
        else:
            self._driver_call(sql, "Statement", lambda: cursor.execute(sql))
        logger.debug("statement.executed", dialect=self._dialect.name, arg_count=len(params))

    @staticmethod
    def _rowcount(cursor: Any) -> int:
        count = getattr(cursor, "rowcount", -1)
        return count if isinstance(count, int) and count >= 0 else 0

    # -- Statements --------------------------------------------------------------

    def execute(
        self,
        sql: str,
        args: Sequence[Any] = (),
        type_tags: Sequence[TagLike] = (),
    ) -> int:
        """Run one statement and return the affected-row count.

        Engines that report no count (DDL, or SELECT on most drivers) give 0.

        Raises:
            BindError: ``len(args) != len(type_tags)`` or a value cannot be
                bound. Raised before a connection is borrowed.
            ExecutionError: The engine rejected the statement.
        """
        params = self._bind(sql, args, type_tags)
        with self._session(sql) as (_, cursor):
            self._run(cursor, sql, params)
            return self._rowcount(cursor)

    # Same operation, named for the statement kind at the call site
    insert = execute
    update = execute
    delete = execute

    def insert_returning_keys(
        self,
        sql: str,
        args: Sequence[Any],
        type_tags: Sequence[TagLike],
        key_holder: GeneratedKeyHolder,
    ) -> int:
        """Run an INSERT and fill ``key_holder`` with the keys it generated.

        The holder is only filled after every requested key has been read,
        converted and committed; on any key error the insert is rolled back.

        Raises:
            BindError: Argument/tag mismatch, before any engine call.
            ExecutionError: The engine rejected the statement.
            NoGeneratedKeysError: No key came back, or a requested key
                column is missing.
            InvalidKeyTypeError: A key is not integer-valued.
            UnknownTypeError: A key's SQL type is not registered.
            ConfigError: The holder was already populated.
        """
        if key_holder.populated:
            raise ConfigError("GeneratedKeyHolder has already been populated")
        params = self._bind(sql, args, type_tags)
        prepared = self._dialect.prepare_insert(sql, key_holder.columns)

        with self._session(prepared) as (conn, cursor):
            self._run(cursor, prepared, params)
            handle = StatementHandle(
                connection=conn,
                cursor=cursor,
                sql=prepared,
                key_columns=key_holder.columns,
                table=key_holder.table,
            )
            raw_keys = self._driver_call(
                prepared,
                "Reading generated keys",
                lambda: self._dialect.extract_generated_keys(handle),
            )
            keys = self._convert_keys(raw_keys, key_holder.columns)
            count = self._rowcount(cursor)

        key_holder.fill(keys)
        logger.debug(
            "statement.keys_generated",
            dialect=self._dialect.name,
            keys=dict(keys),
        )
        return count

    def _convert_keys(self, raw_keys: list[RawKey], requested: Sequence[str]) -> dict[str, int]:
        if not raw_keys:
            raise NoGeneratedKeysError(
                f"No generated keys returned for columns {list(requested)}"
            ).with_context(dialect=self._dialect.name)

        by_name = {self._dialect.unquote_identifier(c).lower(): c for c in requested}
        keys: dict[str, int] = {}
        for raw in raw_keys:
            column = by_name.get(self._dialect.unquote_identifier(raw.column_name).lower())
            # a NULL key means the engine generated nothing for that column
            if column is None or column in keys or raw.raw_value is None:
                continue
            column_type = lookup_by_sql_type_id(raw.sql_type_id)
            try:
                keys[column] = column_type.to_numeric_key(raw.raw_value)
            except SqlBridgeError as e:
                raise e.with_context(column=column, dialect=self._dialect.name)

        missing = [c for c in requested if c not in keys]
        if missing:
            raise NoGeneratedKeysError(
                f"Generated keys missing for columns {missing}; "
                f"engine returned {[k.column_name for k in raw_keys]}"
            ).with_context(dialect=self._dialect.name, column=missing[0])
        return keys

    # -- Queries -----------------------------------------------------------------

    def query_for_one(
        self,
        sql: str,
        args: Sequence[Any],
        type_tags: Sequence[TagLike],
        row_mapper: RowMapper[T],
    ) -> OneResult[T]:
        """Run a query expected to produce one row.

        The mapper sees the first row only; when a second row exists the
        outcome is ``MoreThanOne`` and that row is not mapped.
        """
        params = self._bind(sql, args, type_tags)
        with self._session(sql) as (_, cursor):
            self._run(cursor, sql, params)
            with RowCursor(cursor, self._dialect, owns_cursor=False) as rows:
                if not rows.advance():
                    return NoRows()
                value = row_mapper(rows)
                if rows.advance():
                    return MoreThanOne()
                return Exactly(value)

    def query_for_long(
        self,
        sql: str,
        args: Sequence[Any] = (),
        type_tags: Sequence[TagLike] = (),
    ) -> int:
        """Run a scalar query and return column 0 of its single row as an int.

        Raises:
            NoResultError: No row, or the value is NULL.
            AmbiguousResultError: More than one row.
            TypeMismatchError: The value is not integral.
        """
        match self.query_for_one(sql, args, type_tags, lambda rows: rows.get_long(0)):
            case Exactly(value) if value is not None:
                return value
            case Exactly(_):
                raise NoResultError("Scalar query returned NULL").with_context(
                    sql=sql, dialect=self._dialect.name
                )
            case MoreThanOne():
                raise AmbiguousResultError(
                    "Scalar query returned more than one row"
                ).with_context(sql=sql, dialect=self._dialect.name)
            case _:
                raise NoResultError("Scalar query returned no rows").with_context(
                    sql=sql, dialect=self._dialect.name
                )

    def query_for_all(
        self,
        sql: str,
        args: Sequence[Any],
        type_tags: Sequence[TagLike],
        row_mapper: RowMapper[T],
    ) -> list[T]:
        """Run a query and map every row."""
        params = self._bind(sql, args, type_tags)
        results: list[T] = []
        with self._session(sql) as (_, cursor):
            self._run(cursor, sql, params)
            with RowCursor(cursor, self._dialect, owns_cursor=False) as rows:
                while rows.advance():
                    results.append(row_mapper(rows))
        return results

    def query_iter(
        self,
        sql: str,
        args: Sequence[Any],
        type_tags: Sequence[TagLike],
        row_mapper: RowMapper[T],
    ) -> Iterator[T]:
        """Stream mapped rows one at a time.

        The connection stays borrowed until the iterator is exhausted or
        closed; stop early with ``close()`` (or ``contextlib.closing``) so the
        statement is rolled back and its connection released.

        Example:
            >>> from contextlib import closing
            >>> with closing(access.query_iter(sql, [], [], mapper)) as rows:
            ...     first = next(rows)
        """
        params = self._bind(sql, args, type_tags)
        with self._session(sql) as (_, cursor):
            self._run(cursor, sql, params)
            with RowCursor(cursor, self._dialect, owns_cursor=False) as rows:
                while rows.advance():
                    yield row_mapper(rows)

    # -- Schema helpers ------------------------------------------------------------

    def _run_statements(self, statements: list[str]) -> None:
        label = statements[-1] if statements else ""
        with self._session(label) as (_, cursor):
            for statement in statements:
                self._run(cursor, statement, [])

    def create_table(self, table: str, columns: Sequence[LogicalColumn]) -> None:
        """Create ``table`` with the dialect's DDL, companion objects first."""
        self._run_statements(self._dialect.render_create_table(table, columns))

    def drop_table(self, table: str, columns: Sequence[LogicalColumn] = ()) -> None:
        """Drop ``table`` and the companion objects its generated ids need."""
        self._run_statements(self._dialect.render_drop_table(table, columns))

    # -- Health ------------------------------------------------------------------

    def ping(self) -> bool:
        """Run the dialect's ping statement; ``False`` if it fails."""
        try:
            self.query_for_one(self._dialect.ping_statement, (), (), lambda rows: rows.get_object(0))
        except SqlBridgeError as e:
            logger.warning("database.ping_failed", dialect=self._dialect.name, error=str(e))
            return False
        return True


__all__ = [
    "DatabaseAccess",
    "RowMapper",
]
