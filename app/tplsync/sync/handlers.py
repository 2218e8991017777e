"""Action handlers.

One handler per action. Handlers are the only code touching template
files and run statistics. They never raise: every failure becomes an
error counter and a failed ActionResult.

Remove records go through the pack handler during execution and through
``remove_template`` only after the database has been saved, so content
is always persisted before its file is deleted.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from tplsync.sync.models import ActionResult, Outcome, Record, SyncAction, SyncStats
from tplsync.sync.scanner import ensure_parent_dirs, template_path
from tplsync.sync.store import ContentStore, StoreError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ActionContext:
    """Shared state handed to every handler.

    Attributes:
        root: Watched template directory.
        store: File access used for reading and writing templates.
        stats: Counters updated by the handlers.
    """

    root: Path
    store: ContentStore
    stats: SyncStats


Handler = Callable[[Record, ActionContext], ActionResult]


def normalize_content(data: bytes) -> bytes:
    """Strip every CR and LF byte so content fits on one database line."""
    return data.replace(b"\r", b"").replace(b"\n", b"")


def pack_template(record: Record, context: ActionContext) -> ActionResult:
    """Capture a template's current content into its record.

    The record keeps its previous content only if the file cannot be
    read. A readable file always replaces it, even when nothing is left
    after stripping line breaks.

    Args:
        record: Pack or remove record.
        context: Handler context.

    Returns:
        ADDED, UPDATED or UNCHANGED, or FAILED on a read error.
    """
    stats = context.stats
    previous = record.previous

    try:
        content = normalize_content(context.store.read(template_path(context.root, record.path)))
    except (StoreError, ValueError) as e:
        stats.pack_read_errors += 1
        record.payload = previous
        logger.warning("Could not pack %s: %s", record.path, e)
        return ActionResult(record.path, record.action, Outcome.FAILED, error=str(e))

    if content and not previous:
        stats.packed += 1
        outcome = Outcome.ADDED
        logger.info("adding %s...", record.path)
    elif content != previous:
        stats.repacked += 1
        outcome = Outcome.UPDATED
        logger.info("updating %s...", record.path)
    else:
        outcome = Outcome.UNCHANGED

    if not content:
        logger.debug("%s is empty", record.path)

    record.payload = content
    record.captured = True
    return ActionResult(record.path, record.action, outcome)


def unpack_template(record: Record, context: ActionContext) -> ActionResult:
    """Write a stored template back to disk.

    Counted as unpacked even when the write fails. The payload stays on
    the record either way.
    """
    context.stats.unpacked += 1
    logger.info("unpacking %s...", record.path)

    try:
        target = ensure_parent_dirs(context.root, record.path)
        context.store.write(target, record.payload)
    except (StoreError, OSError, ValueError) as e:
        context.stats.unpack_write_errors += 1
        logger.warning("Could not unpack %s: %s", record.path, e)
        return ActionResult(record.path, record.action, Outcome.FAILED, error=str(e))

    return ActionResult(record.path, record.action, Outcome.UNPACKED)


def ignore_template(record: Record, context: ActionContext) -> ActionResult:
    """Leave a database-only record untouched."""
    context.stats.ignored += 1
    return ActionResult(record.path, record.action, Outcome.IGNORED)


def remove_template(record: Record, context: ActionContext) -> ActionResult:
    """Delete an excluded template whose content has been saved.

    A template that could not be read and had nothing in the database
    is kept on disk. A failed delete is logged and otherwise ignored.

    Args:
        record: Remove record, already packed and saved.
        context: Handler context.

    Returns:
        LEFT_OUT, or FAILED if the template was kept.
    """
    if not record.captured and not record.payload:
        logger.warning(
            "Keeping %s: it could not be read and is not in the database", record.path
        )
        return ActionResult(
            record.path,
            record.action,
            Outcome.FAILED,
            error="Unreadable and not in the database, file kept",
        )

    context.stats.left_out += 1
    logger.info("leaving out %s...", record.path)
    try:
        template_path(context.root, record.path).unlink()
    except (OSError, ValueError) as e:
        logger.debug("Could not delete %s: %s", record.path, e)

    return ActionResult(record.path, record.action, Outcome.LEFT_OUT)


# Handler run for each action during the execution pass.
EXECUTION_HANDLERS: dict[SyncAction, Handler] = {
    SyncAction.PACK: pack_template,
    SyncAction.UNPACK: unpack_template,
    SyncAction.REMOVE: pack_template,
    SyncAction.IGNORE: ignore_template,
}


def execute_record(record: Record, context: ActionContext) -> ActionResult:
    """Run the execution-pass handler for a record's action."""
    return EXECUTION_HANDLERS[record.action](record, context)
