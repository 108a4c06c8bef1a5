"""Test fixtures for SysrootKit tests.

This package provides reusable pytest fixtures for testing SysrootKit components.
Fixtures are organized by type:

- toolchains: Mock sysroot directories with stub GCC drivers
- directories: Isolated SysrootKit home directories and settings

Import fixtures in your tests using:
    from tests.fixtures.toolchains import cross_sysroot
    from tests.fixtures.directories import isolated_settings
"""

__all__ = [
    "toolchains",
    "directories",
]
