"""
Entry point for running SysrootKit as a module.

Usage: python -m sysrootkit [command] [options]
"""

from sysrootkit.cli.parser import main

if __name__ == "__main__":
    main()
