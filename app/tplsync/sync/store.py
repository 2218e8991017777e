"""Byte-level file access for template contents."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when a template cannot be read or written."""


class ContentStore:
    """Reads and writes whole template files as bytes.

    Attributes:
        _size_limit: Largest file accepted by ``read``, None for no limit.
    """

    def __init__(self, size_limit: int | None = None) -> None:
        """Initialize the ContentStore.

        Args:
            size_limit: Largest file accepted by ``read``, in bytes.
        """
        self._size_limit = size_limit

    def read(self, path: Path) -> bytes:
        """Read a whole file.

        Args:
            path: File to read.

        Returns:
            File content.

        Raises:
            StoreError: If the file is larger than the size limit or
                cannot be read.
        """
        try:
            with open(path, "rb") as f:
                if self._size_limit is not None:
                    size = f.seek(0, 2)
                    if size > self._size_limit:
                        msg = f"{path} is {size} bytes, limit is {self._size_limit}"
                        raise StoreError(msg)
                    f.seek(0)
                return f.read()
        except OSError as e:
            raise StoreError(f"Failed to read {path}: {e}") from e

    def write(self, path: Path, data: bytes) -> None:
        """Write a whole file, replacing any previous content.

        Args:
            path: File to write.
            data: Content to write.

        Raises:
            StoreError: If the file cannot be opened or not every byte
                was written.
        """
        try:
            with open(path, "wb") as f:
                written = f.write(data)
        except OSError as e:
            raise StoreError(f"Failed to write {path}: {e}") from e
        if written != len(data):
            msg = f"Short write to {path}: {written} of {len(data)} bytes"
            raise StoreError(msg)
        logger.debug("Wrote %d bytes to %s", written, path)
