"""
Queue File Utilities

Line-oriented persistence for the pending queue (urls.txt) and the processed
list (indexed.txt). One URL per line, UTF-8, trailing newline tolerated.

Writes are durable before returning: appends are fsync'ed, rewrites go through a
temporary sibling file that replaces the target in one step.
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)


def load_list(path: str) -> list[str]:
    """
    Read every line of a text file as an ordered list.

    Args:
        path: Path to the queue file

    Returns:
        Lines in file order, without line terminators. Empty file yields [].

    Raises:
        IOError: If the file is missing or can't be read
    """
    file_path = Path(path)

    if not file_path.is_file():
        error_msg = f"Queue file not found: {path}"
        logger.error(error_msg)
        raise IOError(error_msg)

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        error_msg = f"Failed to read queue file: {path} - {str(e)}"
        logger.error(error_msg)
        raise IOError(error_msg) from e


def append_line(path: str, value: str) -> None:
    """
    Append a single value plus line terminator, flushed to disk before returning.

    Args:
        path: Path to the queue file (created if missing)
        value: Line content

    Raises:
        IOError: If the write fails
    """
    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write(f"{value}\n")
            f.flush()
            os.fsync(f.fileno())
    except OSError as e:
        error_msg = f"Failed to append to queue file: {path} - {str(e)}"
        logger.error(error_msg)
        raise IOError(error_msg) from e


def rewrite_list(path: str, values: Iterable[str]) -> None:
    """
    Atomically replace the file contents with the given values, one per line.

    Args:
        path: Path to the queue file
        values: Ordered lines to write

    Raises:
        IOError: If the write or the replace fails
    """
    file_path = Path(path)
    tmp_name = None

    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=file_path.parent,
            prefix=f".{file_path.name}.",
            suffix=".tmp",
        )
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            for value in values:
                f.write(f"{value}\n")
            f.flush()
            os.fsync(f.fileno())

        # mkstemp creates 0600 files; keep the target's permissions
        if file_path.exists():
            shutil.copymode(file_path, tmp_name)

        os.replace(tmp_name, file_path)
        tmp_name = None

    except OSError as e:
        error_msg = f"Failed to rewrite queue file: {path} - {str(e)}"
        logger.error(error_msg)
        raise IOError(error_msg) from e

    finally:
        # Leftover only when the replace did not happen
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)


def clear(path: str) -> None:
    """
    Truncate the file to empty content, creating it if missing.

    Args:
        path: Path to the queue file

    Raises:
        IOError: If the file can't be truncated
    """
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.flush()
            os.fsync(f.fileno())
    except OSError as e:
        error_msg = f"Failed to clear queue file: {path} - {str(e)}"
        logger.error(error_msg)
        raise IOError(error_msg) from e
