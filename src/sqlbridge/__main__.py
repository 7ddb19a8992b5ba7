"""Allow ``python -m sqlbridge``."""

from sqlbridge.cli import app

app()
