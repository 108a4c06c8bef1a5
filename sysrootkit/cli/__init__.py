"""
SysrootKit CLI module.

This module provides the ``sysroot-manager`` and ``cflag-manager``
command-line interfaces.
"""

from .parser import CflagCLI, SysrootCLI, cflag_main, main
from . import utils

__all__ = ["CflagCLI", "SysrootCLI", "cflag_main", "main", "utils"]
