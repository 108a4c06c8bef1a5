"""
Filesystem helpers for SysrootKit state files.

All persisted state is written through :func:`atomic_write` so that an
interrupted invocation never leaves a truncated file behind.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    This ensures the file is never in a partially-written state.
    If the write fails, the original file (if any) remains unchanged.

    Args:
        file_path: Path to write to
        content: Content to write (string or bytes)
        encoding: Text encoding (used only for string content)

    Example:
        >>> atomic_write('sysroots.json', '{"sysroots": []}')
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Same directory keeps the rename on one filesystem
    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        temp_path.replace(file_path)

    except Exception:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError:
            pass
        raise


def read_single_line(file_path: Union[str, Path]) -> Optional[str]:
    """
    Read the first line of a small state file.

    Args:
        file_path: Path to the state file

    Returns:
        First line without its trailing newline, or None if the file is absent
    """
    file_path = Path(file_path)
    if not file_path.exists():
        return None

    with open(file_path, "r", encoding="utf-8") as f:
        line = f.readline()
    return line.rstrip("\n")


def write_single_line(file_path: Union[str, Path], value: str) -> None:
    """Atomically replace a state file with a single line."""
    atomic_write(file_path, f"{value}\n")


def remove_file(file_path: Union[str, Path]) -> bool:
    """
    Delete a file if it exists.

    Returns:
        True if a file was removed, False if there was nothing to remove
    """
    file_path = Path(file_path)
    try:
        file_path.unlink()
        logger.debug(f"Removed {file_path}")
        return True
    except FileNotFoundError:
        return False


def is_executable_file(path: Path) -> bool:
    """Check that path is a regular file the current user may execute."""
    return path.is_file() and os.access(path, os.X_OK)
