"""Allow running tplsync as ``python -m tplsync``."""

from tplsync.cli.main import app

app()
