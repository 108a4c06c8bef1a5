"""Command implementations for the SysrootKit CLIs."""
