"""
Centralized exception hierarchy for SysrootKit.

This module defines all custom exceptions used across the codebase so that
the CLI can map each family of failures to a single exit code.
"""

from typing import Iterable


# ============================================================================
# Base Exceptions
# ============================================================================


class SysrootKitError(Exception):
    """Base exception for all SysrootKit errors."""

    pass


# ============================================================================
# Input Validation Exceptions
# ============================================================================


class ValidationError(SysrootKitError):
    """Raised when user input is invalid and must be corrected."""

    pass


class DuplicateProfileError(ValidationError):
    """Raised when a sysroot profile with the same path or name is registered."""

    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"Sysroot with {field} '{value}' already exists")


class UnsupportedStandardError(ValidationError):
    """Raised when a language standard is not accepted by the host compiler."""

    def __init__(self, standard: str, supported: Iterable[str]):
        self.standard = standard
        self.supported = list(supported)
        super().__init__(
            f"'{standard}' is not a supported standard. "
            f"Supported: {', '.join(self.supported) or '<none>'}"
        )


# ============================================================================
# Lookup Exceptions
# ============================================================================


class NotFoundError(SysrootKitError):
    """Base exception when a named entity cannot be found."""

    pass


class ProfileNotFoundError(NotFoundError):
    """Raised when no sysroot profile has the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Sysroot '{name}' not found")


# ============================================================================
# Toolchain Exceptions
# ============================================================================


class ToolchainError(SysrootKitError):
    """Base exception for toolchain-related errors."""

    pass


class ToolchainNotFoundError(ToolchainError):
    """Raised when no compiler can be located under a sysroot."""

    def __init__(self, sysroot_path: str):
        self.sysroot_path = sysroot_path
        super().__init__(f"No GCC found in sysroot: {sysroot_path}")


# ============================================================================
# Fatal Exceptions
# ============================================================================


class PersistenceError(SysrootKitError):
    """Raised when a state file cannot be read or written."""

    pass


class RegistryLockTimeout(PersistenceError):
    """Raised when the registry lock cannot be acquired within timeout."""

    pass


class DependencyMissingError(SysrootKitError):
    """Raised when a required external executable is not installed."""

    def __init__(self, executable: str):
        self.executable = executable
        super().__init__(
            f"{executable} is required but not installed or not on PATH"
        )


class ConfigurationError(SysrootKitError):
    """Raised when the configuration file is malformed."""

    pass
