"""Tests for the sqlbridge Typer CLI."""

import json
import os
import sqlite3

import pytest
from typer.testing import CliRunner

from sqlbridge import __version__
from sqlbridge.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for key in list(os.environ):
        if key.startswith("SQLBRIDGE_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def orders_db(tmp_path):
    path = tmp_path / "orders.db"
    conn = sqlite3.connect(path)
    conn.execute("CREATE TABLE orders (id INTEGER PRIMARY KEY, name TEXT)")
    conn.executemany("INSERT INTO orders (name) VALUES (?)", [("a",), ("b",), ("c",)])
    conn.commit()
    conn.close()
    return f"sqlite:///{path}"


class TestRoot:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.strip() == f"sqlbridge {__version__}"

    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ["dialects", "ddl", "query-long", "ping"]:
            assert command in result.output


class TestDialects:
    def test_json(self):
        result = runner.invoke(app, ["dialects", "--json"])
        assert result.exit_code == 0

        rows = {row["name"]: row for row in json.loads(result.output)}
        assert sorted(rows) == ["db2", "mysql", "oracle", "postgresql", "sqlite"]
        assert rows["postgresql"]["placeholder"] == "%s"
        assert rows["postgresql"]["boolean"] == "BOOLEAN"
        assert rows["oracle"]["placeholder"] == ":1"
        assert rows["oracle"]["limit"] is False
        assert rows["mysql"]["quote"] == "`"
        assert rows["db2"]["keys"] == "follow_up_query"

    def test_table(self):
        result = runner.invoke(app, ["dialects"])
        assert result.exit_code == 0
        assert "sqlite" in result.output


class TestDdl:
    def test_postgresql(self):
        result = runner.invoke(
            app,
            ["ddl", "orders", "id:long:generated", "name:string:width=100", "-d", "postgresql"],
        )
        assert result.exit_code == 0
        assert result.output.strip() == (
            'CREATE TABLE "orders" ("id" BIGINT NOT NULL GENERATED BY DEFAULT AS IDENTITY, '
            '"name" VARCHAR(100), PRIMARY KEY ("id"));'
        )

    def test_oracle_with_drop_json(self):
        result = runner.invoke(
            app, ["ddl", "orders", "id:long:generated", "--dialect", "oracle", "--drop", "--json"]
        )
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["create"][0] == 'CREATE SEQUENCE "orders_id_seq"'
        assert payload["drop"] == ['DROP TABLE "orders"', 'DROP SEQUENCE "orders_id_seq"']

    def test_bad_column_spec(self):
        result = runner.invoke(app, ["ddl", "orders", "id"])
        assert result.exit_code == 2

    def test_unknown_dialect(self):
        result = runner.invoke(app, ["ddl", "orders", "id:long:generated", "-d", "mongodb"])
        assert result.exit_code == 1
        assert "Unknown dialect" in result.output

    def test_two_primary_keys(self):
        result = runner.invoke(app, ["ddl", "t", "a:long:pk", "b:long:pk"])
        assert result.exit_code == 1
        assert "SCHEMA" in result.output


class TestQueryLong:
    def test_scalar(self, orders_db):
        result = runner.invoke(app, ["query-long", "SELECT COUNT(*) FROM orders", "--url", orders_db])
        assert result.exit_code == 0
        assert result.output.strip() == "3"

    def test_json(self, orders_db):
        result = runner.invoke(app, ["query-long", "SELECT MAX(id) FROM orders", "-u", orders_db, "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"value": 3}

    def test_url_from_environment(self, orders_db, monkeypatch):
        monkeypatch.setenv("SQLBRIDGE_DATABASE_URL", orders_db)
        result = runner.invoke(app, ["query-long", "SELECT MIN(id) FROM orders"])
        assert result.exit_code == 0
        assert result.output.strip() == "1"

    def test_no_rows(self, orders_db):
        result = runner.invoke(app, ["query-long", "SELECT id FROM orders WHERE id > 10", "-u", orders_db])
        assert result.exit_code == 1
        assert "CARDINALITY" in result.output

    def test_statement_error(self, orders_db):
        result = runner.invoke(app, ["query-long", "SELECT COUNT(*) FROM missing", "-u", orders_db])
        assert result.exit_code == 1
        assert "no such table" in result.output


class TestPing:
    def test_ok(self, orders_db):
        result = runner.invoke(app, ["ping", "--url", orders_db])
        assert result.exit_code == 0
        assert "OK" in result.output
        assert "sqlite" in result.output

    def test_unreachable(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'missing' / 'x.db'}"
        result = runner.invoke(app, ["ping", "--url", url])
        assert result.exit_code == 1
        assert "Unreachable" in result.output

    def test_default_in_memory_database(self):
        result = runner.invoke(app, ["ping"])
        assert result.exit_code == 0
