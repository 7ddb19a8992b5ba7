"""
CLI layer for sqlbridge.

Provides a Typer application whose commands delegate to ``sqlbridge.core``.
This package handles only terminal transport: argument parsing, coloured
output, and table formatting.

Entry point::

    sqlbridge --help
"""

from sqlbridge.cli.app import app

__all__ = ["app"]
