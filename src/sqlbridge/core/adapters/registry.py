"""Data source registry and factory.

Manifesto:
    Consumers should never hard-code data source class names. The registry
    maps ``DatabaseType`` strings to data source classes and the
    ``get_data_source()`` factory creates a configured instance from keyword
    arguments, a ``DatabaseConfig`` or the application settings.

Features:
    - ``DataSourceRegistry`` singleton with pre-registered defaults
    - ``register()`` for custom / third-party data sources
    - ``get_data_source()`` factory: type + kwargs -> data source
    - ``data_source_from_settings()``: ``BridgeSettings`` -> data source

Tags:
    sqlbridge, database, registry, factory, singleton
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlbridge.core.enums import DatabaseType
from sqlbridge.core.errors import ConfigError

from .base import BaseDataSource
from .db2 import DB2DataSource
from .mysql import MySQLDataSource
from .oracle import OracleDataSource
from .postgresql import PostgreSQLDataSource
from .sqlite import SQLiteDataSource
from .types import DatabaseConfig

if TYPE_CHECKING:
    from sqlbridge.core.settings import BridgeSettings


class DataSourceRegistry:
    """
    Registry for data source factories.

    Pre-registered data sources:
    - ``sqlite`` -- :class:`SQLiteDataSource`
    - ``postgresql`` / ``postgres`` -- :class:`PostgreSQLDataSource`
    - ``db2`` -- :class:`DB2DataSource`
    - ``mysql`` / ``mariadb`` -- :class:`MySQLDataSource`
    - ``oracle`` -- :class:`OracleDataSource`
    """

    def __init__(self):
        self._factories: dict[str, type[BaseDataSource]] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        self._factories["sqlite"] = SQLiteDataSource
        self._factories["postgresql"] = PostgreSQLDataSource
        self._factories["postgres"] = PostgreSQLDataSource  # Alias
        self._factories["db2"] = DB2DataSource
        self._factories["mysql"] = MySQLDataSource
        self._factories["mariadb"] = MySQLDataSource  # Alias
        self._factories["oracle"] = OracleDataSource

    def register(self, name: str, source_class: type[BaseDataSource]) -> None:
        """Register a data source factory."""
        self._factories[name.lower()] = source_class

    def create(self, name: str, **kwargs: Any) -> BaseDataSource:
        """Create a data source by name."""
        name = name.lower()
        if name not in self._factories:
            raise ConfigError(f"Unknown data source type: {name}")
        return self._factories[name](**kwargs)

    def list_data_sources(self) -> list[str]:
        """List registered data source names."""
        return sorted(self._factories.keys())


# Global registry
data_source_registry = DataSourceRegistry()


def get_data_source(db_type: DatabaseType | str, **kwargs: Any) -> BaseDataSource:
    """
    Get a data source by type.

    Usage:
        source = get_data_source(DatabaseType.SQLITE, path="orders.db")
        source = get_data_source("postgresql", host="localhost", database="orders")
    """
    name = db_type.value if isinstance(db_type, DatabaseType) else db_type
    return data_source_registry.create(name, **kwargs)


def data_source_from_config(config: DatabaseConfig) -> BaseDataSource:
    """Create the data source described by ``config``."""
    if config.db_type is DatabaseType.SQLITE:
        return get_data_source(config.db_type, path=config.path or ":memory:", **config.options)

    kwargs: dict[str, Any] = {
        "host": config.host,
        "port": config.effective_port,
        "database": config.database,
        "username": config.username,
        "password": config.password,
        **config.options,
    }
    if config.db_type is not DatabaseType.DB2:
        kwargs["pool_size"] = config.pool_size
    return get_data_source(config.db_type, **kwargs)


def data_source_from_settings(settings: BridgeSettings) -> BaseDataSource:
    """Create the data source configured by environment / ``.env`` settings."""
    return data_source_from_config(settings.to_database_config())


__all__ = [
    "DataSourceRegistry",
    "data_source_registry",
    "get_data_source",
    "data_source_from_config",
    "data_source_from_settings",
]
