"""Flat template database I/O.

The database is a single file with one record per line::

    <utf-8 path>,<content>\\n

Only the first comma separates the path from the content, so content may
contain commas but never a line break. There is no header. Blank lines
and lines without a comma are skipped when reading.
"""

import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path
from tempfile import NamedTemporaryFile

from tplsync.sync.models import Record

logger = logging.getLogger(__name__)

_SEPARATOR = b","


class DatabaseError(Exception):
    """Raised when the database file cannot be read or written."""


def parse_database(data: bytes) -> Iterator[tuple[str, bytes]]:
    """Parse database content into ``(path, payload)`` pairs.

    Args:
        data: Raw database file content.

    Yields:
        Path and stored payload for each well-formed line, in file order.
    """
    for line_number, line in enumerate(data.split(b"\n"), start=1):
        line = line.removesuffix(b"\r")
        if not line.strip():
            continue

        path_bytes, separator, payload = line.partition(_SEPARATOR)
        if not separator or not path_bytes:
            logger.debug("Skipping line %d without a path", line_number)
            continue

        try:
            path = path_bytes.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("Skipping line %d: path is not valid UTF-8", line_number)
            continue

        yield path, payload


def serialize_database(records: Iterable[Record]) -> bytes:
    """Serialize records in the order given.

    Args:
        records: Records to write, already in database order.

    Returns:
        Database file content.
    """
    return b"".join(
        record.path.encode("utf-8") + _SEPARATOR + record.payload + b"\n" for record in records
    )


def load_database(path: Path) -> list[tuple[str, bytes]]:
    """Read and parse a database file.

    A missing database is treated as empty.

    Args:
        path: Database file path.

    Returns:
        ``(path, payload)`` pairs in file order.

    Raises:
        DatabaseError: If the file exists but cannot be read.
    """
    try:
        data = path.read_bytes()
    except FileNotFoundError:
        logger.info("No database at %s, starting empty", path)
        return []
    except OSError as e:
        raise DatabaseError(f"Failed to read database: {e}") from e

    return list(parse_database(data))


def save_database(path: Path, records: Iterable[Record]) -> Path:
    """Write records to the database file.

    The file is written atomically by first writing to a temporary file
    in the same directory and then using os.replace().

    Args:
        path: Database file path.
        records: Records to write, already in database order.

    Returns:
        Path where the database was saved.

    Raises:
        DatabaseError: If the file cannot be written.
    """
    data = serialize_database(records)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=path.parent,
            prefix=f".{path.name}.",
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            f.write(data)
        os.replace(str(tmp_path), str(path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise DatabaseError(f"Failed to write database: {e}") from e

    logger.debug("Saved %d bytes to %s", len(data), path)
    return path
