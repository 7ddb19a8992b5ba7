"""
CLI: ``sqlbridge query-long`` and ``sqlbridge ping`` -- run against the configured database.

The database comes from ``SQLBRIDGE_*`` settings unless ``--url`` is given.
"""

from __future__ import annotations

import json

import typer

from sqlbridge.cli.utils import console, err_console, open_access, reported_errors


def query_long(
    sql: str = typer.Argument(..., help="Scalar query returning one integer"),
    url: str | None = typer.Option(None, "--url", "-u", help="Database URL (overrides settings)"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Run a scalar query and print its single integer result."""
    with reported_errors(), open_access(url) as access:
        value = access.query_for_long(sql)

    if json_out:
        console.print_json(json.dumps({"value": value}))
    else:
        console.print(value)


def ping(
    url: str | None = typer.Option(None, "--url", "-u", help="Database URL (overrides settings)"),
) -> None:
    """Check that the configured database answers."""
    with reported_errors(), open_access(url) as access:
        ok = access.ping()
        dialect = access.dialect.name

    if not ok:
        err_console.print(f"[bold red]Unreachable[/bold red] ({dialect})")
        raise typer.Exit(code=1)
    console.print(f"[green]OK[/green] ({dialect})")
