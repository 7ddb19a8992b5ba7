"""
CLI: ``sqlbridge dialects`` and ``sqlbridge ddl`` -- inspect dialect behavior offline.
"""

from __future__ import annotations

import json

import typer

from sqlbridge.cli.utils import console, parse_column_spec, print_rows, reported_errors
from sqlbridge.core.columns import LogicalColumn
from sqlbridge.core.dialect import get_dialect, list_dialects
from sqlbridge.core.types import ColumnType

_BOOLEAN = LogicalColumn("flag", ColumnType.BOOLEAN)


def dialects(
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Show the capabilities of every registered dialect."""
    rows = []
    for name in list_dialects():
        d = get_dialect(name)
        rows.append(
            {
                "name": d.name,
                "driver": d.driver_name,
                "placeholder": d.placeholder(0),
                "boolean": d.type_name(_BOOLEAN),
                "limit": d.is_limit_supported(),
                "keys": d.key_retrieval.value,
                "quote": d.quote_identifier("x")[0],
            }
        )
    print_rows(rows, as_json=json_out, title="Dialects")


def ddl(
    table: str = typer.Argument(..., help="Table name"),
    columns: list[str] = typer.Argument(
        ..., help="Column specs: name:type[:pk|:generated|:notnull|:width=N|:default=V]"
    ),
    dialect: str = typer.Option("sqlite", "--dialect", "-d", help="Target dialect"),
    drop: bool = typer.Option(False, "--drop", help="Also print the DROP statements"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Render CREATE TABLE for the given column specs."""
    logical = [parse_column_spec(spec) for spec in columns]
    with reported_errors():
        d = get_dialect(dialect)
        statements = d.render_create_table(table, logical)
        drops = d.render_drop_table(table, logical) if drop else []

    if json_out:
        console.print_json(json.dumps({"create": statements, "drop": drops}))
        return
    for statement in statements + drops:
        console.print(f"{statement};", markup=False, highlight=False, soft_wrap=True)
