"""Reconciliation domain models.

This module defines the data structures shared by the reconciliation
table, the action handlers and the CLI: the closed set of sync actions,
the per-path record, run statistics and the run configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from tplsync.core.paths import TEMPLATE_SUFFIX

if TYPE_CHECKING:
    from tplsync.sync.filter import InclusionFilter


class SyncAction(Enum):
    """Action decided for a single path.

    Declaration order is execution order.

    Attributes:
        PACK: File exists and is included; capture its content.
        UNPACK: Only the database has it and it is included; write it to disk.
        REMOVE: File exists but is excluded; capture its content, then delete it.
        IGNORE: Only the database has it and it is excluded; leave it dormant.
    """

    PACK = "pack"
    UNPACK = "unpack"
    REMOVE = "remove"
    IGNORE = "ignore"

    @property
    def rank(self) -> int:
        """Position of this action in execution order."""
        return _ACTION_RANKS[self]


_ACTION_RANKS: dict[SyncAction, int] = {action: index for index, action in enumerate(SyncAction)}


class Outcome(str, Enum):
    """What a handler actually did to a record.

    Attributes:
        ADDED: Content captured for the first time.
        UPDATED: Captured content differs from the stored copy.
        UNCHANGED: Captured content matches the stored copy.
        UNPACKED: Stored content written back to disk.
        LEFT_OUT: Excluded file deleted from disk.
        IGNORED: Database-only record left untouched.
        FAILED: The read, write or delete did not succeed.
    """

    ADDED = "added"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    UNPACKED = "unpacked"
    LEFT_OUT = "left_out"
    IGNORED = "ignored"
    FAILED = "failed"


def path_depth(path: str) -> int:
    """Count the separators in a normalized relative path."""
    return path.count("/")


@dataclass(slots=True)
class Record:
    """Reconciliation unit for one path.

    Records are mutable: handlers replace ``payload`` in place. The
    action is assigned once, when the record is created.

    Attributes:
        path: Relative, forward-slash path; unique within a table.
        depth: Number of separators in ``path``, used for ordering.
        action: Action decided for this path.
        payload: Content written to the database.
        stored: Content the database held for a path first seen on disk.
            Used only to tell new, changed and unchanged templates apart.
        captured: Whether the pack handler read the file successfully.
    """

    path: str
    depth: int
    action: SyncAction
    payload: bytes = b""
    stored: bytes = b""
    captured: bool = False

    def __post_init__(self) -> None:
        """Validate record data after initialization."""
        if not self.path:
            msg = "Record path cannot be empty"
            raise ValueError(msg)

    @property
    def previous(self) -> bytes:
        """Content known for this path before it was packed."""
        return self.payload or self.stored

    def execution_key(self) -> tuple[int, int, str]:
        """Sort key for running handlers."""
        return (self.action.rank, self.depth, self.path)

    def output_key(self) -> tuple[int, str]:
        """Sort key for writing the database."""
        return (self.depth, self.path)


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Result of running one handler on one record.

    Attributes:
        path: Record path.
        action: Action that was executed.
        outcome: What the handler did.
        error: Error message if the handler failed.
    """

    path: str
    action: SyncAction
    outcome: Outcome
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the handler failed."""
        return self.outcome == Outcome.FAILED

    @property
    def changed(self) -> bool:
        """Check if the handler changed the database or the directory."""
        return self.outcome in (
            Outcome.ADDED,
            Outcome.UPDATED,
            Outcome.UNPACKED,
            Outcome.LEFT_OUT,
        )


@dataclass(slots=True)
class SyncStats:
    """Aggregate counters for one run.

    ``unpacked`` counts attempts, so it also includes failed writes.
    """

    packed: int = 0
    repacked: int = 0
    unpacked: int = 0
    ignored: int = 0
    left_out: int = 0
    pack_read_errors: int = 0
    unpack_write_errors: int = 0

    @property
    def error_count(self) -> int:
        """Total read and write errors."""
        return self.pack_read_errors + self.unpack_write_errors

    def summary(self) -> str:
        """One-line run summary."""
        return (
            f"{self.packed} template(s) packed, {self.repacked} repacked, "
            f"{self.unpacked} unpacked, {self.left_out} left out"
        )


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Everything one run needs, resolved once before it starts.

    Attributes:
        root: Watched template directory.
        database: Database file path.
        inclusion: Inclusion filter built from the selected tag's rules.
        tag: Run tag, if any.
        size_limit: Largest template accepted when packing, in bytes.
        suffix: File name suffix of tracked templates.
    """

    root: Path
    database: Path
    inclusion: InclusionFilter
    tag: str | None = None
    size_limit: int | None = None
    suffix: str = TEMPLATE_SUFFIX


@dataclass(slots=True)
class SyncReport:
    """Outcome of a complete run.

    Attributes:
        stats: Aggregate counters.
        results: Handler results in execution order.
        records: Final records in database order.
        database_saved: Whether the database was written.
        database_error: Error message if the database could not be written.
    """

    stats: SyncStats
    results: list[ActionResult] = field(default_factory=list)
    records: list[Record] = field(default_factory=list)
    database_saved: bool = False
    database_error: str | None = None
