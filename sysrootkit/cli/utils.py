"""
Shared utilities for CLI commands.

Provides common functionality used across both command-line front-ends:
output helpers, dependency checks and construction of the service objects
from resolved settings.
"""

import logging
import shutil
import sys
from pathlib import Path
from typing import Optional, TextIO

from sysrootkit.core.environment import EnvironmentContext
from sysrootkit.core.exceptions import DependencyMissingError
from sysrootkit.core.settings import ManagerSettings, load_settings
from sysrootkit.flags.manager import FlagSetManager
from sysrootkit.flags.standards import StandardsProber
from sysrootkit.sysroot.activator import EnvironmentActivator
from sysrootkit.sysroot.registry import ProfileRegistry
from sysrootkit.sysroot.session import SessionStore
from sysrootkit.toolchain.prober import ToolchainProber

logger = logging.getLogger(__name__)

STDOUT_DEST = "-"


# ============================================================================
# Settings and Service Construction
# ============================================================================


def resolve_settings(args) -> ManagerSettings:
    """Load settings honouring the global ``--config`` option."""
    config_file = getattr(args, "config", None)
    return load_settings(Path(config_file) if config_file else None)


def build_registry(settings: ManagerSettings) -> ProfileRegistry:
    return ProfileRegistry(
        settings.registry_file,
        prober=ToolchainProber(timeout=settings.probe_timeout),
        lock_path=settings.lock_dir / "registry.lock",
        lock_timeout=settings.lock_timeout,
    )


def build_activator(
    settings: ManagerSettings, context: EnvironmentContext
) -> EnvironmentActivator:
    registry = build_registry(settings)
    session = SessionStore(settings.active_file, settings.path_backup_file)
    return EnvironmentActivator(registry, session, context)


def build_flag_manager(
    settings: ManagerSettings, context: EnvironmentContext, prompt=None
) -> FlagSetManager:
    standards = StandardsProber(
        c_compiler=settings.c_compiler,
        cxx_compiler=settings.cxx_compiler,
        timeout=settings.probe_timeout,
    )
    return FlagSetManager(
        context, settings.flags_backup_file, standards=standards, prompt=prompt
    )


# ============================================================================
# Dependency Checks
# ============================================================================


def require_executable(name: str) -> str:
    """
    Ensure an executable is available.

    Args:
        name: Executable name or path

    Returns:
        Resolved executable path

    Raises:
        DependencyMissingError: If the executable cannot be found
    """
    found = shutil.which(name)
    if not found:
        raise DependencyMissingError(name)
    logger.debug(f"Found {name}: {found}")
    return found


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


def output_stream(args) -> TextIO:
    """
    Stream for human-readable command output.

    In --eval mode stdout is evaluated by the calling shell, so everything
    that is not shell code goes to stderr.
    """
    return sys.stderr if getattr(args, "eval", False) else sys.stdout


def print_header(title: str, char: str = "=", file: Optional[TextIO] = None):
    file = file or sys.stdout
    print(title, file=file)
    print(char * len(title), file=file)
