"""Tests for BridgeSettings."""

import os

import pytest
from pydantic import ValidationError

from sqlbridge.core.enums import DatabaseType
from sqlbridge.core.settings import BridgeSettings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Run each test without SQLBRIDGE_* variables or a stray .env file."""
    for key in list(os.environ):
        if key.startswith("SQLBRIDGE_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


class TestDefaults:
    def test_in_memory_sqlite(self):
        settings = BridgeSettings()
        assert settings.db_type is DatabaseType.SQLITE
        assert settings.path == ":memory:"
        assert settings.resolved_db_type() is DatabaseType.SQLITE
        assert settings.log_level == "INFO"
        assert settings.json_logs is None

    def test_to_database_config(self):
        config = BridgeSettings().to_database_config()
        assert config.db_type is DatabaseType.SQLITE
        assert config.path == ":memory:"


class TestEnvironment:
    def test_reads_prefixed_variables(self, monkeypatch):
        monkeypatch.setenv("SQLBRIDGE_DB_TYPE", "mysql")
        monkeypatch.setenv("SQLBRIDGE_HOST", "db.internal")
        monkeypatch.setenv("SQLBRIDGE_POOL_SIZE", "12")

        config = BridgeSettings().to_database_config()

        assert config.db_type is DatabaseType.MYSQL
        assert config.host == "db.internal"
        assert config.pool_size == 12
        assert config.effective_port == 3306

    def test_reads_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("SQLBRIDGE_DATABASE_URL=postgresql://app@db/orders\n")
        assert BridgeSettings().resolved_db_type() is DatabaseType.POSTGRESQL

    def test_log_level_normalised(self, monkeypatch):
        monkeypatch.setenv("SQLBRIDGE_LOG_LEVEL", "debug")
        assert BridgeSettings().log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            BridgeSettings(log_level="chatty")

    def test_pool_size_bounds(self):
        with pytest.raises(ValidationError):
            BridgeSettings(pool_size=0)

    def test_unrelated_variables_ignored(self, monkeypatch):
        monkeypatch.setenv("SQLBRIDGE_UNKNOWN_OPTION", "x")
        BridgeSettings()


class TestDatabaseUrl:
    def test_url_overrides_fields(self):
        settings = BridgeSettings(
            database_url="postgresql://app:s%40cret@db:6543/orders?sslmode=require",
            db_type=DatabaseType.MYSQL,
            pool_size=3,
        )
        config = settings.to_database_config()

        assert config.db_type is DatabaseType.POSTGRESQL
        assert config.host == "db"
        assert config.port == 6543
        assert config.database == "orders"
        assert config.username == "app"
        assert config.password == "s@cret"
        assert config.pool_size == 3
        assert config.options == {"sslmode": "require"}

    def test_url_with_driver_suffix(self):
        config = BridgeSettings(database_url="mysql+mysqlconnector://u@h/db").to_database_config()
        assert config.db_type is DatabaseType.MYSQL
        assert config.effective_port == 3306

    def test_missing_url_parts_fall_back_to_fields(self):
        settings = BridgeSettings(database_url="db2:///SAMPLE", host="db2.internal", username="inst")
        config = settings.to_database_config()
        assert config.host == "db2.internal"
        assert config.username == "inst"
        assert config.database == "SAMPLE"

    @pytest.mark.parametrize(
        "url,path",
        [
            ("sqlite:///orders.db", "orders.db"),
            ("sqlite:////var/data/orders.db", "/var/data/orders.db"),
            ("sqlite://", ":memory:"),
            ("sqlite:///:memory:", ":memory:"),
            ("sqlite::memory:", ":memory:"),
            ("local.sqlite3", "local.sqlite3"),
        ],
    )
    def test_sqlite_urls(self, url, path):
        config = BridgeSettings(database_url=url).to_database_config()
        assert config.db_type is DatabaseType.SQLITE
        assert config.path == path
