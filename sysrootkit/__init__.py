"""
SysrootKit - named cross-compilation sysroot profiles and compiler flag sets.

Register toolchain sysroots by name, switch the compiler environment between
them, and manage C/C++ standard flags independently.
"""

__version__ = "0.1.0"
