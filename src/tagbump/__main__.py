"""Allow running tagbump with ``python -m tagbump``."""

from tagbump.cli.app import app

app()
