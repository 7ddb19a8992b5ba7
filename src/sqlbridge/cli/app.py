"""
Root Typer application for the sqlbridge CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

app = Typer(
    name="sqlbridge",
    help="sqlbridge: typed statement execution across SQL dialects.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from sqlbridge import __version__

        typer.echo(f"sqlbridge {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """sqlbridge CLI for inspecting dialects, rendering DDL and running scalar queries."""


# ── Command registration ─────────────────────────────────────────────────

from sqlbridge.cli.query import ping, query_long  # noqa: E402
from sqlbridge.cli.schema import ddl, dialects  # noqa: E402

app.command("dialects", help="Dialect capability table.")(dialects)
app.command("ddl", help="Render CREATE TABLE for column specs.")(ddl)
app.command("query-long", help="Run a scalar integer query.")(query_long)
app.command("ping", help="Check database connectivity.")(ping)
