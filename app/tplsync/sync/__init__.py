"""Template directory and database reconciliation.

This package provides the inclusion filter, the reconciliation table,
the action handlers and the run orchestration.
"""

from tplsync.sync.database import DatabaseError, load_database, parse_database, save_database
from tplsync.sync.engine import RootNotFoundError, build_run_config, build_table, run_sync
from tplsync.sync.filter import InclusionFilter, PatternError, build_filter
from tplsync.sync.models import (
    ActionResult,
    Outcome,
    Record,
    RunConfig,
    SyncAction,
    SyncReport,
    SyncStats,
)
from tplsync.sync.scanner import ScanError, TemplateScanner, prune_empty_dirs
from tplsync.sync.store import ContentStore, StoreError
from tplsync.sync.table import ReconciliationTable

__all__ = [
    "ActionResult",
    "ContentStore",
    "DatabaseError",
    "InclusionFilter",
    "Outcome",
    "PatternError",
    "Record",
    "ReconciliationTable",
    "RootNotFoundError",
    "RunConfig",
    "ScanError",
    "StoreError",
    "SyncAction",
    "SyncReport",
    "SyncStats",
    "TemplateScanner",
    "build_filter",
    "build_run_config",
    "build_table",
    "load_database",
    "parse_database",
    "prune_empty_dirs",
    "run_sync",
    "save_database",
]
