"""
Active session state.

Two small files describe the session: a marker naming the active profile and
a one-shot backup of PATH taken at the first activation.
"""

import logging
from pathlib import Path
from typing import Optional

from sysrootkit.core.exceptions import PersistenceError
from sysrootkit.core.filesystem import read_single_line, remove_file, write_single_line

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Persist the active profile name and the PATH backup.

    Attributes:
        active_file: Marker file holding the active profile name
        path_backup_file: File holding PATH as it was before activation
    """

    def __init__(self, active_file: Path, path_backup_file: Path):
        self.active_file = Path(active_file)
        self.path_backup_file = Path(path_backup_file)

    def active_name(self) -> Optional[str]:
        """Return the active profile name, or None when inactive."""
        name = self._read(self.active_file)
        return name or None

    def set_active_name(self, name: str) -> None:
        self._write(self.active_file, name)

    def clear_active_name(self) -> bool:
        return self._remove(self.active_file)

    def has_path_backup(self) -> bool:
        return self.path_backup_file.exists()

    def path_backup(self) -> Optional[str]:
        """Return the backed-up PATH, or None if no backup is pending."""
        return self._read(self.path_backup_file)

    def backup_path(self, path_value: str) -> bool:
        """
        Save PATH unless a backup already exists.

        Returns:
            True if a backup was written, False if one was already pending
        """
        if self.has_path_backup():
            return False
        self._write(self.path_backup_file, path_value)
        logger.info("PATH backed up")
        return True

    def clear_path_backup(self) -> bool:
        return self._remove(self.path_backup_file)

    def _read(self, path: Path) -> Optional[str]:
        try:
            return read_single_line(path)
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Cannot read {path}: {e}") from e

    def _write(self, path: Path, value: str) -> None:
        try:
            write_single_line(path, value)
        except OSError as e:
            raise PersistenceError(f"Cannot write {path}: {e}") from e

    def _remove(self, path: Path) -> bool:
        try:
            return remove_file(path)
        except OSError as e:
            raise PersistenceError(f"Cannot remove {path}: {e}") from e
