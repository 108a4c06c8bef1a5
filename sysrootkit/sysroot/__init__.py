"""
Sysroot profile management for SysrootKit.

This module provides the persistent profile registry, the active-session
store and the environment activator built on top of them.
"""

from sysrootkit.sysroot.registry import SysrootProfile, ProfileRegistry
from sysrootkit.sysroot.session import SessionStore
from sysrootkit.sysroot.activator import (
    SYSROOT_VARIABLES,
    EnvironmentActivator,
    compute_environment,
)
from sysrootkit.sysroot.envscript import generate_env_script

__all__ = [
    "SysrootProfile",
    "ProfileRegistry",
    "SessionStore",
    "SYSROOT_VARIABLES",
    "EnvironmentActivator",
    "compute_environment",
    "generate_env_script",
]
