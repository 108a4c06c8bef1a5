"""
Settings for SysrootKit.

Settings come from an optional YAML file stored in the SysrootKit home
directory (``~/.sysroot-manager/config.yaml`` unless overridden). Every state
file location can be changed there; relative paths are resolved against the
home directory.

Example configuration::

    registry_file: sysroots.json
    active_file: current_sysroot
    c_compiler: gcc-13
    cxx_compiler: g++-13
    probe_timeout: 10
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from sysrootkit.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "SYSROOT_MANAGER_HOME"
CONFIG_FILE_NAME = "config.yaml"

_PATH_KEYS = (
    "registry_file",
    "active_file",
    "path_backup_file",
    "flags_backup_file",
    "lock_dir",
)


def get_home_dir() -> Path:
    """
    Get the SysrootKit home directory.

    Returns:
        Path: ``$SYSROOT_MANAGER_HOME`` if set, otherwise ``~/.sysroot-manager``
    """
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".sysroot-manager"


@dataclass
class ManagerSettings:
    """
    Resolved SysrootKit settings.

    Attributes:
        home_dir: Base directory for all state files
        registry_file: JSON registry of sysroot profiles
        active_file: Marker holding the active profile name
        path_backup_file: PATH value captured at first activation
        flags_backup_file: Compiler flags captured before the first ``set``
        lock_dir: Directory holding inter-process lock files
        c_compiler: Host C compiler used to probe C standards
        cxx_compiler: Host C++ compiler used to probe C++ standards
        probe_timeout: Seconds allowed for each compiler probe
        lock_timeout: Seconds to wait for the registry lock
    """

    home_dir: Path
    registry_file: Path
    active_file: Path
    path_backup_file: Path
    flags_backup_file: Path
    lock_dir: Path
    c_compiler: str = "gcc"
    cxx_compiler: str = "g++"
    probe_timeout: float = 5.0
    lock_timeout: float = 30.0

    @classmethod
    def defaults(cls, home_dir: Optional[Path] = None) -> "ManagerSettings":
        """Build settings with every state file inside home_dir."""
        home_dir = Path(home_dir) if home_dir is not None else get_home_dir()
        return cls(
            home_dir=home_dir,
            registry_file=home_dir / "sysroots.json",
            active_file=home_dir / "current_sysroot",
            path_backup_file=home_dir / "path_backup",
            flags_backup_file=home_dir / "cflags_backup",
            lock_dir=home_dir / "lock",
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for display."""
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            data[f.name] = str(value) if isinstance(value, Path) else value
        return data


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        ConfigurationError: If the file is required but missing, cannot be
            parsed, or does not contain a mapping
    """
    if not config_file.exists():
        if required:
            raise ConfigurationError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot read {config_file}: {e}") from e

    config = config or {}
    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Configuration in {config_file} must be a mapping, "
            f"got {type(config).__name__}"
        )
    return config


def load_settings(
    config_file: Optional[Path] = None, home_dir: Optional[Path] = None
) -> ManagerSettings:
    """
    Resolve settings from defaults and an optional YAML file.

    Args:
        config_file: Explicit configuration file (must exist when given)
        home_dir: Override for the SysrootKit home directory

    Returns:
        Resolved ManagerSettings

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    settings = ManagerSettings.defaults(home_dir)

    if config_file is not None:
        config = load_yaml_config(Path(config_file), required=True)
    else:
        config = load_yaml_config(settings.home_dir / CONFIG_FILE_NAME)

    known = {f.name for f in fields(ManagerSettings)} - {"home_dir"}
    for key, value in config.items():
        if key not in known:
            logger.warning(f"Ignoring unknown configuration key: {key}")
            continue

        if key in _PATH_KEYS:
            if not isinstance(value, str) or not value:
                raise ConfigurationError(f"'{key}' must be a non-empty path string")
            path = Path(value).expanduser()
            if not path.is_absolute():
                path = settings.home_dir / path
            setattr(settings, key, path)
        elif key in ("c_compiler", "cxx_compiler"):
            if not isinstance(value, str) or not value:
                raise ConfigurationError(f"'{key}' must be a non-empty string")
            setattr(settings, key, value)
        else:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(f"'{key}' must be a number")
            if value <= 0:
                raise ConfigurationError(f"'{key}' must be positive")
            setattr(settings, key, float(value))

    logger.debug(f"Settings: {settings.to_dict()}")
    return settings
