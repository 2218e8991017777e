"""CLI commands for tplsync.

This package contains all subcommand implementations.
"""

from tplsync.cli.commands import init, status, sync

__all__ = ["init", "status", "sync"]
