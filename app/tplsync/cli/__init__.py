"""CLI package for tplsync.

This package contains the Typer application and all subcommands.
"""

from tplsync.cli.main import app

__all__ = ["app"]
