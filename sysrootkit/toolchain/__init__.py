"""
Toolchain detection for SysrootKit.

This module provides functionality for:
- Locating the GCC driver inside a sysroot
- Extracting compiler version and target triplet
- Deriving companion tool paths from the compiler's cross prefix
"""

from sysrootkit.toolchain.prober import (
    COMPANION_TOOLS,
    UNKNOWN,
    ProbeResult,
    ToolSet,
    ToolchainProber,
    derive_companion_tools,
    derive_tool_prefix,
)

__all__ = [
    "COMPANION_TOOLS",
    "UNKNOWN",
    "ProbeResult",
    "ToolSet",
    "ToolchainProber",
    "derive_companion_tools",
    "derive_tool_prefix",
]
