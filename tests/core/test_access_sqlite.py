"""
End-to-end DatabaseAccess tests on a real SQLite database.

The insert-with-keys flow runs twice: once with the stock SQLite dialect
(keys from ``cursor.lastrowid``) and once with a dialect that reads them
from a ``RETURNING`` clause, which needs SQLite 3.35+.
"""

import sqlite3
from datetime import datetime
from decimal import Decimal

import pytest

from sqlbridge.core.access import DatabaseAccess
from sqlbridge.core.columns import LogicalColumn
from sqlbridge.core.dialect import SQLiteDialect, get_dialect, register_dialect
from sqlbridge.core.enums import KeyRetrieval
from sqlbridge.core.errors import (
    AmbiguousResultError,
    BindError,
    DatabaseConnectionError,
    ExecutionError,
    InvalidKeyTypeError,
    NoGeneratedKeysError,
    NoResultError,
)
from sqlbridge.core.keys import GeneratedKeyHolder
from sqlbridge.core.result import Exactly, MoreThanOne, NoRows
from sqlbridge.core.types import ColumnType

requires_returning = pytest.mark.skipif(
    sqlite3.sqlite_version_info < (3, 35, 0),
    reason="RETURNING needs SQLite 3.35+",
)


class ReturningSQLiteDialect(SQLiteDialect):
    """SQLite reading generated keys from a RETURNING clause."""

    name = "sqlite_returning"
    key_retrieval = KeyRetrieval.RETURNING


ORDER_COLUMNS = [
    LogicalColumn.generated_id(),
    LogicalColumn("name", ColumnType.STRING, width=100, nullable=False),
    LogicalColumn("active", ColumnType.BOOLEAN, default=True),
    LogicalColumn("amount", ColumnType.DECIMAL, width=12, scale=2),
    LogicalColumn("created", ColumnType.DATE),
]

INSERT_ORDER = 'INSERT INTO "orders" ("name", "active", "amount", "created") VALUES (?, ?, ?, ?)'
ORDER_TAGS = [ColumnType.STRING, ColumnType.BOOLEAN, ColumnType.DECIMAL, ColumnType.DATE]


@pytest.fixture(
    params=[
        pytest.param("sqlite", id="lastrowid"),
        pytest.param("sqlite_returning", id="returning", marks=requires_returning),
    ]
)
def access(request, sqlite_source, dialect_registry):
    register_dialect("sqlite_returning", ReturningSQLiteDialect())
    access = DatabaseAccess(sqlite_source, get_dialect(request.param))
    access.create_table("orders", ORDER_COLUMNS)
    return access


def _insert(access, name, amount="9.99", active=True):
    holder = GeneratedKeyHolder("id", table="orders")
    access.insert_returning_keys(
        INSERT_ORDER,
        [name, active, Decimal(amount), datetime(2024, 5, 6, 7, 8, 9)],
        ORDER_TAGS,
        holder,
    )
    return holder


def _order(rows):
    return {
        "id": rows.get_long(0),
        "name": rows.get_string(1),
        "active": rows.get_boolean(2),
        "amount": rows.get_decimal(3),
        "created": rows.get_timestamp(4),
    }


SELECT_ORDER = 'SELECT "id", "name", "active", "amount", "created" FROM "orders" WHERE "id" = ?'


class TestInsertScenario:
    def test_keys_are_sequential(self, access):
        first = _insert(access, "first")
        second = _insert(access, "second")
        assert first.get_key() == 1
        assert second.get_key() == 2
        assert access.query_for_long('SELECT COUNT(*) FROM "orders"') == 2

    def test_deleted_key_is_not_reissued(self, access):
        seen = [_insert(access, "first").get_key(), _insert(access, "second").get_key()]
        access.delete('DELETE FROM "orders" WHERE "id" = ?', [seen[-1]], [ColumnType.LONG])

        third = _insert(access, "third").get_key()

        assert third not in seen
        assert third > max(seen)

    def test_inserted_row_reads_back(self, access):
        key = _insert(access, "widget", amount="12.50").get_key()

        result = access.query_for_one(SELECT_ORDER, [key], [ColumnType.LONG], _order)

        assert result == Exactly(
            {
                "id": key,
                "name": "widget",
                "active": True,
                "amount": Decimal("12.5"),
                "created": datetime(2024, 5, 6, 7, 8, 9),
            }
        )

    def test_boolean_false_round_trip(self, access):
        key = _insert(access, "inactive", active=False).get_key()
        result = access.query_for_one(SELECT_ORDER, [key], [ColumnType.LONG], _order)
        assert result.unwrap()["active"] is False

    def test_zero_row_insert_has_no_keys(self, access):
        holder = GeneratedKeyHolder("id", table="orders")
        with pytest.raises(NoGeneratedKeysError):
            access.insert_returning_keys(
                'INSERT INTO "orders" ("name") SELECT "name" FROM "orders" WHERE 1 = 0',
                [],
                [],
                holder,
            )
        assert not holder.populated

    def test_bind_error_leaves_table_untouched(self, access):
        holder = GeneratedKeyHolder("id")
        with pytest.raises(BindError):
            access.insert_returning_keys(INSERT_ORDER, ["only-name"], ORDER_TAGS, holder)
        assert access.query_for_long('SELECT COUNT(*) FROM "orders"') == 0

    def test_constraint_violation(self, access):
        holder = GeneratedKeyHolder("id")
        with pytest.raises(ExecutionError, match="NOT NULL"):
            access.insert_returning_keys(
                'INSERT INTO "orders" ("name") VALUES (?)', [None], [ColumnType.STRING], holder
            )
        assert not holder.populated


class TestStockSqlite:
    def test_insert_reports_row_count(self, sqlite_access):
        sqlite_access.create_table("orders", ORDER_COLUMNS)
        holder = GeneratedKeyHolder("id")
        count = sqlite_access.insert_returning_keys(
            'INSERT INTO "orders" ("name") VALUES (?)', ["a"], [ColumnType.STRING], holder
        )
        assert count == 1
        assert holder.get_key() == 1

    def test_execute_counts(self, sqlite_access):
        sqlite_access.create_table("orders", ORDER_COLUMNS)
        for name in ["a", "b", "c"]:
            sqlite_access.insert('INSERT INTO "orders" ("name") VALUES (?)', [name], [ColumnType.STRING])

        assert sqlite_access.update(
            'UPDATE "orders" SET "active" = ? WHERE "name" <> ?',
            [False, "a"],
            [ColumnType.BOOLEAN, ColumnType.STRING],
        ) == 2
        assert sqlite_access.delete('DELETE FROM "orders"') == 3

    def test_default_applies(self, sqlite_access):
        sqlite_access.create_table("orders", ORDER_COLUMNS)
        sqlite_access.execute('INSERT INTO "orders" ("name") VALUES (?)', ["a"], [ColumnType.STRING])
        assert sqlite_access.query_for_long('SELECT "active" FROM "orders"') == 1

    def test_drop_table(self, sqlite_access):
        sqlite_access.create_table("orders", ORDER_COLUMNS)
        sqlite_access.drop_table("orders", ORDER_COLUMNS)
        with pytest.raises(ExecutionError, match="no such table"):
            sqlite_access.query_for_long('SELECT COUNT(*) FROM "orders"')


@requires_returning
class TestReturningTextKey:
    def test_text_key_rolls_back(self, sqlite_source):
        access = DatabaseAccess(sqlite_source, ReturningSQLiteDialect())
        access.create_table(
            "codes",
            [
                LogicalColumn("code", ColumnType.STRING, width=8, is_primary_key=True),
                LogicalColumn("label", ColumnType.STRING),
            ],
        )
        holder = GeneratedKeyHolder("code")

        with pytest.raises(InvalidKeyTypeError):
            access.insert_returning_keys(
                'INSERT INTO "codes" ("code", "label") VALUES (?, ?)',
                ["A1", "first"],
                [ColumnType.STRING, ColumnType.STRING],
                holder,
            )

        assert not holder.populated
        assert access.query_for_long('SELECT COUNT(*) FROM "codes"') == 0


class TestQueries:
    @pytest.fixture
    def numbers(self, sqlite_access):
        sqlite_access.execute("CREATE TABLE numbers (n INTEGER, label TEXT)")
        for n in [1, 2, 2]:
            sqlite_access.execute(
                "INSERT INTO numbers VALUES (?, ?)", [n, f"n{n}"], [ColumnType.INTEGER, ColumnType.STRING]
            )
        return sqlite_access

    def test_query_for_one_outcomes(self, numbers):
        def label(rows):
            return rows.get_string(0)

        sql = "SELECT label FROM numbers WHERE n = ?"
        assert numbers.query_for_one(sql, [0], [ColumnType.INTEGER], label) == NoRows()
        assert numbers.query_for_one(sql, [1], [ColumnType.INTEGER], label) == Exactly("n1")
        assert numbers.query_for_one(sql, [2], [ColumnType.INTEGER], label) == MoreThanOne()

    def test_query_iter_streams_in_order(self, numbers):
        rows = numbers.query_iter(
            "SELECT n, label FROM numbers WHERE n >= ? ORDER BY label, rowid",
            [2],
            [ColumnType.INTEGER],
            lambda rows: (rows.get_int(0), rows.get_string(1)),
        )
        assert list(rows) == [(2, "n2"), (2, "n2")]

    def test_query_for_long(self, numbers):
        assert numbers.query_for_long("SELECT SUM(n) FROM numbers") == 5
        assert numbers.query_for_long("SELECT COUNT(*) FROM numbers WHERE n = ?", [2], [ColumnType.INTEGER]) == 2

    def test_query_for_long_null(self, numbers):
        with pytest.raises(NoResultError, match="NULL"):
            numbers.query_for_long("SELECT MAX(n) FROM numbers WHERE n > 10")

    def test_query_for_long_no_rows(self, numbers):
        with pytest.raises(NoResultError):
            numbers.query_for_long("SELECT n FROM numbers WHERE n > 10")

    def test_query_for_long_ambiguous(self, numbers):
        with pytest.raises(AmbiguousResultError):
            numbers.query_for_long("SELECT n FROM numbers")

    def test_query_for_all(self, numbers):
        assert numbers.query_for_all(
            "SELECT n FROM numbers ORDER BY n", [], [], lambda rows: rows.get_int(0)
        ) == [1, 2, 2]

    def test_syntax_error(self, numbers):
        with pytest.raises(ExecutionError) as exc_info:
            numbers.execute("SELEC n FROM numbers")
        assert "syntax error" in str(exc_info.value)
        assert exc_info.value.context.dialect == "sqlite"


class TestPing:
    def test_ping(self, sqlite_access):
        assert sqlite_access.ping() is True

    def test_ping_after_close(self, sqlite_source):
        access = DatabaseAccess(sqlite_source)
        sqlite_source.close()
        assert access.ping() is False
        with pytest.raises(DatabaseConnectionError):
            access.execute("SELECT 1")
