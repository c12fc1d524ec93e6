"""Atomic replacement of project documents.

A project document holds the whole build history, so a partial write would
lose it. The new text goes to a hidden sibling file which then replaces the
target in one rename.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from version_tracker.utils.logging import get_logger

logger = get_logger("utils.atomic")


class AtomicWriteError(Exception):
    """Raised when a document could not be replaced."""

    pass


def atomic_write_text(path: Path, content: str, encoding: str = "utf-8") -> None:
    """
    Replace path with content, leaving the old file intact on failure.

    Args:
        path: Target file path; missing parent directories are created
        content: Full text of the new document
        encoding: Text encoding

    Raises:
        AtomicWriteError: If the file cannot be written or renamed
    """
    path = Path(path)
    temp_path = None

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        # Same directory so the rename never crosses filesystems
        fd, name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        temp_path = Path(name)
        with os.fdopen(fd, "w", encoding=encoding) as f:
            f.write(content)
        temp_path.replace(path)
    except OSError as e:
        logger.error("atomic_write_failed", path=str(path), error=str(e))
        if temp_path is not None and temp_path.exists():
            temp_path.unlink()
        raise AtomicWriteError(f"Failed to atomically write {path}: {e}") from e

    logger.debug("atomic_write_success", path=str(path), size=len(content))
