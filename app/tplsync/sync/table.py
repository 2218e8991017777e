"""Reconciliation table.

Holds one record per path for a single run. Records enter through two
scans: the directory scan creates pack/remove records, then the database
scan adds unpack/ignore records for paths the directory did not have.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from tplsync.sync.models import Record, SyncAction, path_depth

if TYPE_CHECKING:
    from tplsync.sync.filter import InclusionFilter

logger = logging.getLogger(__name__)


class ReconciliationTable:
    """All records of one run, keyed by path.

    The table owns its records; callers get them back in execution or
    database order and mutate them in place.
    """

    def __init__(self) -> None:
        self._records: dict[str, Record] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records.values())

    def add_scanned(self, path: str, depth: int, included: bool) -> Record:
        """Add a template found on disk.

        Args:
            path: Relative template path.
            depth: Directory depth reported by the scan.
            included: Inclusion decision for the path.

        Returns:
            The new pack or remove record.

        Raises:
            ValueError: If the path is already in the table.
        """
        if path in self._records:
            msg = f"Duplicate scanned path: {path}"
            raise ValueError(msg)

        record = Record(
            path=path,
            depth=depth,
            action=SyncAction.PACK if included else SyncAction.REMOVE,
        )
        self._records[path] = record
        return record

    def merge_stored(self, path: str, payload: bytes, included: bool) -> Record:
        """Merge a database entry into the table.

        A path already found on disk keeps its action and payload; the
        stored content is only kept aside for comparison. A new path
        becomes an unpack or ignore record carrying the stored payload.
        When the database lists a path twice, the last entry wins.

        Args:
            path: Relative template path.
            payload: Content stored in the database.
            included: Inclusion decision for the path.

        Returns:
            The existing or new record.
        """
        record = self._records.get(path)
        if record is not None:
            if record.action in (SyncAction.PACK, SyncAction.REMOVE):
                record.stored = payload
            else:
                logger.debug("Duplicate database entry for %s, keeping the last one", path)
                record.payload = payload
            return record

        record = Record(
            path=path,
            depth=path_depth(path),
            action=SyncAction.UNPACK if included else SyncAction.IGNORE,
            payload=payload,
        )
        self._records[path] = record
        return record

    def execution_order(self) -> list[Record]:
        """Records sorted by action, then depth, then path."""
        return sorted(self._records.values(), key=Record.execution_key)

    def output_order(self) -> list[Record]:
        """Records sorted by depth, then path."""
        return sorted(self._records.values(), key=Record.output_key)

    def with_action(self, action: SyncAction) -> list[Record]:
        """Records with the given action, in database order."""
        return [record for record in self.output_order() if record.action == action]

    @classmethod
    def build(
        cls,
        scanned: Iterable[tuple[str, int]],
        stored: Iterable[tuple[str, bytes]],
        inclusion: InclusionFilter,
    ) -> ReconciliationTable:
        """Build a table from a directory scan and a database listing.

        The directory scan is merged first so that files on disk always
        own their path.

        Args:
            scanned: ``(path, depth)`` pairs from the directory scan.
            stored: ``(path, payload)`` pairs from the database.
            inclusion: Filter deciding which paths are kept in sync.

        Returns:
            Populated table.
        """
        table = cls()
        for path, depth in scanned:
            table.add_scanned(path, depth, inclusion.decide(path))
        for path, payload in stored:
            table.merge_stored(path, payload, inclusion.decide(path))
        return table
