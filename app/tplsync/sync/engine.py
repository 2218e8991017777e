"""Reconciliation run orchestration.

Ties the scanner, the database and the handlers together:

1. scan the watched directory and read the database into a table
2. run handlers in execution order
3. save every record to the database in output order
4. delete excluded templates, then prune empty directories

If step 1 fails the run aborts before anything is touched. If step 3
fails, step 4 is skipped so no template is deleted without its content
being saved. The tree and database are assumed to have a single writer
for the duration of a run; nothing is locked.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from tplsync.core.paths import resolve_root
from tplsync.sync.database import DatabaseError, load_database, save_database
from tplsync.sync.filter import build_filter
from tplsync.sync.handlers import ActionContext, execute_record, remove_template
from tplsync.sync.models import RunConfig, SyncAction, SyncReport, SyncStats
from tplsync.sync.scanner import TemplateScanner, prune_empty_dirs
from tplsync.sync.store import ContentStore
from tplsync.sync.table import ReconciliationTable

if TYPE_CHECKING:
    from tplsync.core.config import SyncConfig

logger = logging.getLogger(__name__)


class RootNotFoundError(Exception):
    """Raised when the watched template directory does not exist."""


def build_run_config(
    config: SyncConfig,
    tag: str | None = None,
    *,
    root: Path | None = None,
    database: str | None = None,
) -> tuple[RunConfig, list[str]]:
    """Resolve everything a run needs.

    Rules with invalid patterns are left out of the filter and reported
    back instead of failing the run.

    Args:
        config: Loaded configuration.
        tag: Run tag selecting the rule profile.
        root: Watched directory from the command line, if given.
        database: Database file name from the command line, if given.

    Returns:
        Tuple of (run configuration, rule error messages).

    Raises:
        RootNotFoundError: If the watched directory does not exist.
    """
    root_path = resolve_root(root, config.root)
    if not root_path.is_dir():
        raise RootNotFoundError(f"Template directory not found: {root_path}")

    inclusion, rule_errors = build_filter(config.rules_for(tag))
    run_config = RunConfig(
        root=root_path,
        database=root_path / (database or config.database),
        inclusion=inclusion,
        tag=tag,
        size_limit=config.size_limit,
    )
    return run_config, rule_errors


def build_table(run_config: RunConfig) -> ReconciliationTable:
    """Scan the directory and the database into a reconciliation table.

    Raises:
        ScanError: If the watched directory cannot be listed.
        DatabaseError: If the database exists but cannot be read.
    """
    scanner = TemplateScanner(run_config.root, suffix=run_config.suffix)
    scanned = list(scanner.scan())
    stored = load_database(run_config.database)
    logger.debug("Found %d template(s) on disk, %d in the database", len(scanned), len(stored))
    return ReconciliationTable.build(scanned, stored, run_config.inclusion)


def run_sync(run_config: RunConfig) -> SyncReport:
    """Reconcile the watched directory with its database.

    Args:
        run_config: Resolved run configuration.

    Returns:
        SyncReport with counters, per-record results and final records.

    Raises:
        ScanError: If the watched directory cannot be listed.
        DatabaseError: If the database exists but cannot be read.
    """
    table = build_table(run_config)

    context = ActionContext(
        root=run_config.root,
        store=ContentStore(size_limit=run_config.size_limit),
        stats=SyncStats(),
    )
    report = SyncReport(stats=context.stats)

    for record in table.execution_order():
        report.results.append(execute_record(record, context))

    report.records = table.output_order()
    try:
        save_database(run_config.database, report.records)
    except DatabaseError as e:
        logger.error("Database not saved, keeping excluded templates on disk: %s", e)
        report.database_error = str(e)
        return report
    report.database_saved = True

    for record in table.with_action(SyncAction.REMOVE):
        report.results.append(remove_template(record, context))

    for directory in prune_empty_dirs(run_config.root):
        logger.info("removed empty directory %s", directory.relative_to(run_config.root))

    return report
