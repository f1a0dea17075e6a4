"""
Module: ledger.file_locking

Purpose:
    Cross-platform file locking for companion documents.
    Uses portalocker for Mac, Windows, and Linux compatibility.

Key Functions:
    - locked_file: Context manager for locked file access
    - locked_write_text: Replace a file's text with lock
    - locked_read_modify_write_text: Read-modify-write text with lock

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - ledger.documents: FileDocumentStore
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Generator, TextIO

import portalocker

logger = logging.getLogger(__name__)


@contextmanager
def locked_file(
    path: Path,
    mode: str = 'r',
    lock_type: int = portalocker.LOCK_EX,
) -> Generator[TextIO, None, None]:
    """
    Context manager for cross-platform locked file access.

    Args:
        path: Path to file.
        mode: File open mode ('r', 'r+', 'a', etc.).
        lock_type: Lock type (LOCK_EX for exclusive, LOCK_SH for shared).

    Yields:
        Open file handle with lock held.

    Example:
        >>> with locked_file(path, 'r', portalocker.LOCK_SH) as f:
        ...     text = f.read()
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    # Ensure file exists for read modes
    if 'r' in mode and not path.exists():
        path.touch()

    with open(path, mode, encoding='utf-8') as f:
        portalocker.lock(f, lock_type)
        try:
            yield f
        finally:
            portalocker.unlock(f)


def locked_write_text(path: Path, text: str) -> None:
    """
    Replace the file's content with exclusive lock, creating it if needed.

    The file is truncated only after the lock is held.
    """
    with locked_file(path, 'r+', portalocker.LOCK_EX) as f:
        f.seek(0)
        f.truncate()
        f.write(text)

    logger.debug(f"Wrote {len(text)} chars to {path.name}")


def locked_read_modify_write_text(
    path: Path,
    modifier: Callable[[str], str],
) -> str:
    """
    Read text, apply modifier, write back - all with exclusive lock.

    Args:
        path: Path to an existing text file.
        modifier: Function that takes the current text, returns new text.

    Returns:
        The text that is now on disk.

    Raises:
        FileNotFoundError: If the file does not exist.

    Example:
        >>> locked_read_modify_write_text(path, lambda text: text + "more\\n")
    """
    if not path.exists():
        raise FileNotFoundError(path)

    with open(path, 'r+', encoding='utf-8') as f:
        portalocker.lock(f, portalocker.LOCK_EX)
        try:
            f.seek(0)
            content = f.read()

            modified = modifier(content)
            if modified == content:
                return content

            f.seek(0)
            f.truncate()
            f.write(modified)
            logger.debug(f"Rewrote {path.name} ({len(content)} -> {len(modified)} chars)")
            return modified
        finally:
            portalocker.unlock(f)
