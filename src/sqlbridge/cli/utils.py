"""
CLI utility helpers -- output formatting, settings and column-spec parsing.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from sqlbridge.core.access import DatabaseAccess
from sqlbridge.core.adapters import data_source_from_config
from sqlbridge.core.columns import LogicalColumn
from sqlbridge.core.errors import SqlBridgeError
from sqlbridge.core.logging import configure_logging
from sqlbridge.core.settings import BridgeSettings
from sqlbridge.core.types import ColumnType

console = Console()
err_console = Console(stderr=True)


# ── Settings / access helpers ────────────────────────────────────────────


def load_settings(url: str | None = None) -> BridgeSettings:
    """Settings from the environment, with ``--url`` taking precedence."""
    overrides: dict[str, Any] = {"database_url": url} if url else {}
    settings = BridgeSettings(**overrides)
    configure_logging(level=settings.log_level, json_format=settings.json_logs)
    return settings


@contextmanager
def open_access(url: str | None = None) -> Iterator[DatabaseAccess]:
    """``DatabaseAccess`` for the configured database; the data source is closed on exit."""
    settings = load_settings(url)
    source = data_source_from_config(settings.to_database_config())
    try:
        yield DatabaseAccess(source)
    finally:
        source.close()


@contextmanager
def reported_errors() -> Iterator[None]:
    """Turn ``SqlBridgeError`` into a red message and exit code 1."""
    try:
        yield
    except SqlBridgeError as e:
        err_console.print(f"[bold red]Error[/bold red] ({e.category.value}): {e.message}")
        raise typer.Exit(code=1) from e


# ── Column specs ─────────────────────────────────────────────────────────


def parse_column_spec(spec: str) -> LogicalColumn:
    """Parse ``name:type[:pk|:generated|:notnull|:width=N|:scale=N|:default=V]``.

    ``generated`` implies ``pk``; ``pk`` implies ``notnull``.

    Raises:
        typer.BadParameter: On a malformed spec.
    """
    parts = spec.split(":")
    if len(parts) < 2 or not parts[0]:
        raise typer.BadParameter(f"Column spec {spec!r} must look like name:type[:flags]")

    name, label, *flags = parts
    try:
        column_type = ColumnType.from_label(label)
    except SqlBridgeError as e:
        raise typer.BadParameter(e.message) from e

    options: dict[str, Any] = {}
    for flag in flags:
        key, _, value = flag.partition("=")
        match key.lower():
            case "pk":
                options["is_primary_key"] = True
                options["nullable"] = False
            case "generated":
                options["is_generated_id"] = True
                options["is_primary_key"] = True
                options["nullable"] = False
            case "notnull":
                options["nullable"] = False
            case "width" | "scale":
                if not value.isdigit():
                    raise typer.BadParameter(f"{key} in {spec!r} must be a positive integer")
                options[key.lower()] = int(value)
            case "default":
                options["default"] = _parse_default(value)
            case _:
                raise typer.BadParameter(f"Unknown column flag {flag!r} in {spec!r}")

    try:
        return LogicalColumn(name, column_type, **options)
    except SqlBridgeError as e:
        raise typer.BadParameter(e.message) from e


def _parse_default(value: str) -> Any:
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value


# ── Output helpers ───────────────────────────────────────────────────────


def print_rows(rows: list[dict[str, Any]], *, as_json: bool = False, title: str = "") -> None:
    """Render a list of dicts as a Rich table, or as JSON."""
    if as_json:
        console.print_json(json.dumps(rows, default=str))
        return
    if not rows:
        console.print("[dim]No items.[/dim]")
        return
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in rows[0]:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*(str(v) for v in row.values()))
    console.print(table)
