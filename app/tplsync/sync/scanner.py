"""Template directory scanning and housekeeping.

Walks the watched directory for template files, creates directories for
unpacked templates and prunes directories left empty after a run.
"""

import logging
from collections.abc import Iterator
from pathlib import Path

from tplsync.core.paths import TEMPLATE_SUFFIX

logger = logging.getLogger(__name__)


class ScanError(Exception):
    """Raised when the watched directory cannot be enumerated."""


class TemplateScanner:
    """Lists template files below a root directory.

    Paths are yielded relative to the root with forward slashes, in
    sorted order, directories walked depth-first. Symlinked directories
    are not followed.

    Args:
        root: Watched template directory.
        suffix: Case-sensitive file name suffix of tracked templates.
    """

    def __init__(self, root: Path, suffix: str = TEMPLATE_SUFFIX) -> None:
        self._root = root
        self._suffix = suffix

    def scan(self) -> Iterator[tuple[str, int]]:
        """Yield every template below the root.

        Yields:
            Tuple of (relative path, depth) for each template file.

        Raises:
            ScanError: If the root itself cannot be listed.
        """
        try:
            entries = sorted(self._root.iterdir())
        except OSError as e:
            raise ScanError(f"Cannot list {self._root}: {e}") from e

        yield from self._scan_entries(entries, prefix="", depth=0)

    def _scan_directory(self, directory: Path, prefix: str, depth: int) -> Iterator[tuple[str, int]]:
        """Scan a subdirectory, skipping it if it cannot be listed."""
        try:
            entries = sorted(directory.iterdir())
        except OSError:
            logger.warning("Cannot list directory, skipping: %s", directory)
            return

        yield from self._scan_entries(entries, prefix, depth)

    def _scan_entries(
        self, entries: list[Path], prefix: str, depth: int
    ) -> Iterator[tuple[str, int]]:
        for entry in entries:
            name = entry.name
            if entry.is_dir():
                if entry.is_symlink():
                    logger.debug("Not following symlinked directory: %s", entry)
                    continue
                yield from self._scan_directory(entry, f"{prefix}{name}/", depth + 1)
                continue

            if not name.endswith(self._suffix) or not entry.is_file():
                continue
            yield f"{prefix}{name}", depth


def template_path(root: Path, path: str) -> Path:
    """Map a relative template path to a file below the root.

    Args:
        root: Watched template directory.
        path: Relative, forward-slash template path.

    Returns:
        Path of the template file.

    Raises:
        ValueError: If the path is absolute or climbs out of the root.
    """
    parts = path.split("/")
    if path.startswith("/") or any(part in ("", ".", "..") for part in parts):
        msg = f"Template path must stay below the root: {path!r}"
        raise ValueError(msg)
    return root.joinpath(*parts)


def ensure_parent_dirs(root: Path, path: str) -> Path:
    """Create the directories a template path needs.

    Args:
        root: Watched template directory.
        path: Relative, forward-slash template path.

    Returns:
        Path of the template file.

    Raises:
        ValueError: If the path leaves the root.
        OSError: If a directory cannot be created.
    """
    target = template_path(root, path)
    target.parent.mkdir(parents=True, exist_ok=True)
    return target


def prune_empty_dirs(root: Path) -> list[Path]:
    """Remove directories that contain no files, deepest first.

    The root itself is never removed. Directories that cannot be listed
    or removed are left alone.

    Args:
        root: Watched template directory.

    Returns:
        Directories that were removed.
    """
    removed: list[Path] = []
    _prune(root, root, removed)
    return removed


def _prune(directory: Path, root: Path, removed: list[Path]) -> bool:
    """Prune below ``directory`` and report whether it is now empty."""
    try:
        entries = list(directory.iterdir())
    except OSError:
        logger.debug("Cannot list directory during prune: %s", directory)
        return False

    remaining = 0
    for entry in entries:
        if entry.is_dir() and not entry.is_symlink():
            if not _prune(entry, root, removed):
                remaining += 1
            continue
        remaining += 1

    if remaining or directory == root:
        return False

    try:
        directory.rmdir()
    except OSError as e:
        logger.debug("Could not remove empty directory %s: %s", directory, e)
        return False

    logger.debug("Removed empty directory %s", directory)
    removed.append(directory)
    return True
