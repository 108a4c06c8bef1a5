"""
Core functionality for SysrootKit.

This package contains the foundational modules that other components depend on.
"""

from .environment import (
    EnvironmentContext,
    render_export,
    render_exports,
    render_shell_commands,
)

from .exceptions import (
    SysrootKitError,
    ValidationError,
    DuplicateProfileError,
    UnsupportedStandardError,
    NotFoundError,
    ProfileNotFoundError,
    ToolchainError,
    ToolchainNotFoundError,
    PersistenceError,
    RegistryLockTimeout,
    DependencyMissingError,
    ConfigurationError,
)

from .filesystem import (
    atomic_write,
    read_single_line,
    write_single_line,
    remove_file,
    is_executable_file,
)

from .prompt import (
    Prompt,
    ConsolePrompt,
    ScriptedPrompt,
)

from .settings import (
    ManagerSettings,
    get_home_dir,
    load_settings,
    load_yaml_config,
)

__all__ = [
    # Environment
    "EnvironmentContext",
    "render_export",
    "render_exports",
    "render_shell_commands",
    # Exceptions
    "SysrootKitError",
    "ValidationError",
    "DuplicateProfileError",
    "UnsupportedStandardError",
    "NotFoundError",
    "ProfileNotFoundError",
    "ToolchainError",
    "ToolchainNotFoundError",
    "PersistenceError",
    "RegistryLockTimeout",
    "DependencyMissingError",
    "ConfigurationError",
    # Filesystem
    "atomic_write",
    "read_single_line",
    "write_single_line",
    "remove_file",
    "is_executable_file",
    # Prompt
    "Prompt",
    "ConsolePrompt",
    "ScriptedPrompt",
    # Settings
    "ManagerSettings",
    "get_home_dir",
    "load_settings",
    "load_yaml_config",
]
