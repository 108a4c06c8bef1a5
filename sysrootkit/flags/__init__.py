"""
Compiler flag management for SysrootKit.

Independent of sysroot profiles: manages CFLAGS, CXXFLAGS and ASFLAGS for a
chosen language standard.
"""

from sysrootkit.flags.standards import (
    C_STANDARD_CANDIDATES,
    CPP_STANDARD_CANDIDATES,
    StandardsProber,
    SupportedStandards,
    is_cpp_standard,
)
from sysrootkit.flags.manager import (
    FLAG_VARIABLES,
    FlagSet,
    FlagSetManager,
    compose_flags,
)

__all__ = [
    "C_STANDARD_CANDIDATES",
    "CPP_STANDARD_CANDIDATES",
    "StandardsProber",
    "SupportedStandards",
    "is_cpp_standard",
    "FLAG_VARIABLES",
    "FlagSet",
    "FlagSetManager",
    "compose_flags",
]
