"""
Shared pytest fixtures and configuration for sqlbridge tests.

This module provides:
- ``sys.path`` setup so ``sqlbridge`` and ``tests._support`` import from a checkout
- In-memory SQLite data sources and ``DatabaseAccess`` instances
- Dialect registry isolation for tests that register their own dialects
"""

import sys
from collections.abc import Generator
from pathlib import Path

import pytest

# Ensure sqlbridge package and test support helpers are importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlbridge.core import dialect as dialect_module  # noqa: E402
from sqlbridge.core.access import DatabaseAccess  # noqa: E402
from sqlbridge.core.adapters.sqlite import SQLiteDataSource  # noqa: E402

ALL_DIALECTS = ["sqlite", "postgresql", "mysql", "db2", "oracle"]


@pytest.fixture
def sqlite_source() -> Generator[SQLiteDataSource, None, None]:
    """Private in-memory SQLite database shared by every connection of the source."""
    source = SQLiteDataSource(":memory:")
    yield source
    source.close()


@pytest.fixture
def sqlite_access(sqlite_source: SQLiteDataSource) -> DatabaseAccess:
    return DatabaseAccess(sqlite_source)


@pytest.fixture
def dialect_registry() -> Generator[dict, None, None]:
    """Snapshot the dialect registry and restore it after the test."""
    saved = dict(dialect_module._DIALECTS)
    yield dialect_module._DIALECTS
    dialect_module._DIALECTS.clear()
    dialect_module._DIALECTS.update(saved)
