"""
Persistent registry of named sysroot profiles.

The registry is a single JSON document::

    {"sysroots": [{"name": ..., "path": ..., "gcc_version": ...,
                   "target_triplet": ..., "added_date": ...}]}

Every mutation reads the whole document, builds the new one in memory and
replaces the file atomically while holding an inter-process file lock.
"""

import json
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from filelock import FileLock, Timeout

from sysrootkit.core.exceptions import (
    DuplicateProfileError,
    PersistenceError,
    ProfileNotFoundError,
    RegistryLockTimeout,
    ValidationError,
)
from sysrootkit.core.filesystem import atomic_write
from sysrootkit.toolchain.prober import UNKNOWN, ToolchainProber

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SysrootProfile:
    """
    A registered sysroot.

    Attributes:
        name: Unique lookup key
        path: Canonical absolute sysroot path
        compiler_version: Detected GCC version or ``"unknown"``
        target_triplet: Detected target triplet or ``"unknown"``
        added_at: ISO 8601 timestamp of registration
    """

    name: str
    path: Path
    compiler_version: str = UNKNOWN
    target_triplet: str = UNKNOWN
    added_at: str = ""

    def to_dict(self) -> Dict[str, str]:
        """Convert to the registry's JSON representation."""
        return {
            "name": self.name,
            "path": str(self.path),
            "gcc_version": self.compiler_version,
            "target_triplet": self.target_triplet,
            "added_date": self.added_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SysrootProfile":
        """
        Create a profile from its JSON representation.

        Raises:
            KeyError: If name or path is missing
        """
        return cls(
            name=data["name"],
            path=Path(data["path"]),
            compiler_version=data.get("gcc_version") or UNKNOWN,
            target_triplet=data.get("target_triplet") or UNKNOWN,
            added_at=data.get("added_date", ""),
        )


class ProfileRegistry:
    """
    Manages the sysroot profile registry file.

    Example:
        >>> registry = ProfileRegistry(Path.home() / ".sysroot-manager" / "sysroots.json")
        >>> profile = registry.add(Path("/opt/gcc-arm-linux-gnueabihf"), "arm-linux")
        >>> registry.lookup("arm-linux").path
        PosixPath('/opt/gcc-arm-linux-gnueabihf')
    """

    def __init__(
        self,
        registry_path: Path,
        prober: Optional[ToolchainProber] = None,
        lock_path: Optional[Path] = None,
        lock_timeout: float = 30,
    ):
        """
        Initialize profile registry.

        Args:
            registry_path: Path to the JSON registry file
            prober: Toolchain prober used by add (default: ToolchainProber())
            lock_path: Lock file (default: ``<registry>.lock`` next to it)
            lock_timeout: Seconds to wait for the lock
        """
        self.registry_path = Path(registry_path)
        self.prober = prober or ToolchainProber()
        self.lock_path = (
            Path(lock_path)
            if lock_path is not None
            else self.registry_path.with_name(f"{self.registry_path.name}.lock")
        )
        self.lock_timeout = lock_timeout

        logger.debug(f"Initialized registry at {self.registry_path}")

    def _load_registry(self) -> List[SysrootProfile]:
        """
        Load every profile from disk.

        Returns:
            Profiles in registration order (empty if the file is absent)

        Raises:
            PersistenceError: If the file cannot be read or is malformed
        """
        if not self.registry_path.exists():
            logger.debug("Registry file not found, starting empty")
            return []

        try:
            with open(self.registry_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            raise PersistenceError(
                f"Failed to load registry {self.registry_path}: {e}"
            ) from e

        if not isinstance(data, dict) or not isinstance(data.get("sysroots"), list):
            raise PersistenceError(
                f"Invalid registry format in {self.registry_path}: "
                "expected an object with a 'sysroots' list"
            )

        try:
            return [SysrootProfile.from_dict(entry) for entry in data["sysroots"]]
        except (KeyError, TypeError) as e:
            raise PersistenceError(
                f"Invalid sysroot entry in {self.registry_path}: {e}"
            ) from e

    def _save_registry(self, profiles: List[SysrootProfile]) -> None:
        """
        Save the full registry atomically.

        Raises:
            PersistenceError: If the file cannot be written
        """
        document = {"sysroots": [p.to_dict() for p in profiles]}
        try:
            atomic_write(self.registry_path, json.dumps(document, indent=2) + "\n")
        except OSError as e:
            raise PersistenceError(
                f"Failed to save registry {self.registry_path}: {e}"
            ) from e

        logger.debug(f"Saved registry with {len(profiles)} sysroots")

    @contextmanager
    def _lock(self):
        """
        Hold the registry lock for a read-modify-write cycle.

        Raises:
            RegistryLockTimeout: If lock cannot be acquired within timeout
        """
        try:
            self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(f"Cannot create lock directory: {e}") from e

        lock = FileLock(str(self.lock_path), timeout=self.lock_timeout)
        try:
            with lock:
                logger.debug("Acquired registry lock")
                yield
            logger.debug("Released registry lock")
        except Timeout as e:
            raise RegistryLockTimeout(
                f"Could not acquire registry lock within {self.lock_timeout} seconds"
            ) from e

    def add(self, path: Path, name: Optional[str] = None) -> SysrootProfile:
        """
        Register a new sysroot.

        Args:
            path: Sysroot directory (resolved to an absolute canonical path)
            name: Profile name (default: the directory's final component)

        Returns:
            The stored profile

        Raises:
            ValidationError: If the path is missing or not a directory
            DuplicateProfileError: If the path or name is already registered
            PersistenceError: If the registry cannot be written
        """
        if path is None or str(path) == "":
            raise ValidationError("Sysroot path is required")

        path = Path(path).expanduser()
        if not path.exists():
            raise ValidationError(f"Sysroot directory does not exist: {path}")
        if not path.is_dir():
            raise ValidationError(f"Sysroot path is not a directory: {path}")

        path = path.resolve()
        name = name or path.name
        if not name:
            raise ValidationError(f"Cannot derive a sysroot name from {path}")

        with self._lock():
            profiles = self._load_registry()

            if any(p.path == path for p in profiles):
                raise DuplicateProfileError("path", str(path))
            if any(p.name == name for p in profiles):
                raise DuplicateProfileError("name", name)

            logger.info("Detecting GCC version and target triplet...")
            result = self.prober.probe(path)
            if not result.detected:
                logger.warning(
                    f"No GCC found in {path}; registering with unknown version"
                )

            profile = SysrootProfile(
                name=name,
                path=path,
                compiler_version=result.version,
                target_triplet=result.triplet,
                added_at=datetime.now().astimezone().isoformat(timespec="seconds"),
            )
            self._save_registry(profiles + [profile])

        logger.info(f"Added sysroot '{name}'")
        return profile

    def list(self) -> List[SysrootProfile]:
        """List all profiles in registration order."""
        return self._load_registry()

    def lookup(self, name: str) -> Optional[SysrootProfile]:
        """
        Find a profile by name.

        Returns:
            The first profile with that name, or None
        """
        for profile in self._load_registry():
            if profile.name == name:
                return profile
        return None

    def get(self, name: str) -> SysrootProfile:
        """
        Find a profile by name or fail.

        Raises:
            ProfileNotFoundError: If no profile has that name
        """
        profile = self.lookup(name)
        if profile is None:
            raise ProfileNotFoundError(name)
        return profile

    def remove(self, name: str) -> None:
        """
        Remove a profile by name.

        The registry file is left untouched when the name is unknown.

        Raises:
            ValidationError: If name is empty
            ProfileNotFoundError: If no profile has that name
        """
        if not name:
            raise ValidationError("Sysroot name is required")

        with self._lock():
            profiles = self._load_registry()
            remaining = [p for p in profiles if p.name != name]
            if len(remaining) == len(profiles):
                raise ProfileNotFoundError(name)
            self._save_registry(remaining)

        logger.info(f"Removed sysroot '{name}'")
