"""
SysrootKit CLI argument parsers.

This module implements the two command-line interfaces, ``sysroot-manager``
and ``cflag-manager``, using argparse. Both share global options, logging
setup, error-to-exit-code mapping and the final flush of environment changes.

Environment changes only affect the SysrootKit process itself. To apply them
to an interactive shell, run a command with ``--eval`` and evaluate its
output, for example::

    eval "$(sysroot-manager --eval select arm-linux)"

Sysroot activation and ``cflag-manager set`` both write CFLAGS and CXXFLAGS;
whichever runs last wins.
"""

import argparse
import logging
import os
import sys
from typing import Callable, Dict, List, MutableMapping, Optional

from sysrootkit import __version__ as _package_version
from sysrootkit.cli.utils import output_stream, print_error
from sysrootkit.core.environment import EnvironmentContext, render_shell_commands
from sysrootkit.core.exceptions import (
    ConfigurationError,
    DependencyMissingError,
    PersistenceError,
    SysrootKitError,
)
from sysrootkit.core.prompt import ConsolePrompt, Prompt

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("sysrootkit")
except Exception:
    __version__ = _package_version

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_FATAL = 2
EXIT_INTERRUPTED = 130

FATAL_ERRORS = (PersistenceError, DependencyMissingError, ConfigurationError)


class BaseCLI:
    """Shared behaviour of the SysrootKit command-line interfaces."""

    prog = ""
    description = ""

    def __init__(
        self,
        environ: Optional[MutableMapping[str, str]] = None,
        prompt: Optional[Prompt] = None,
    ):
        """
        Initialize CLI.

        Args:
            environ: Environment to read and update (default: os.environ)
            prompt: Source of interactive answers (default: ConsolePrompt)
        """
        self.environ = environ if environ is not None else os.environ
        self.prompt = prompt or ConsolePrompt()
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog=self.prog,
            description=self.description,
            epilog=f'Use "{self.prog} COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"SysrootKit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            metavar="PATH",
            help="Path to configuration file (default: ~/.sysroot-manager/config.yaml)",
        )
        parser.add_argument(
            "--eval",
            action="store_true",
            help="Print shell commands applying environment changes to stdout",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )
        self._add_commands(subparsers)
        subparsers.add_parser(
            "help", help="Show this help message", description="Show help"
        )

        return parser

    def _add_commands(self, subparsers):
        raise NotImplementedError

    def _command_map(self) -> Dict[str, Callable]:
        raise NotImplementedError

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 success, 1 user error, 2 fatal error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help(output_stream(parsed_args))
            return EXIT_ERROR

        if parsed_args.command == "help":
            self.parser.print_help(output_stream(parsed_args))
            return EXIT_OK

        context = EnvironmentContext.from_environ(self.environ)

        try:
            result = self._dispatch_command(parsed_args, context)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return EXIT_INTERRUPTED
        except FATAL_ERRORS as e:
            print_error(str(e))
            return EXIT_FATAL
        except SysrootKitError as e:
            print_error(str(e))
            return EXIT_ERROR

        self._flush_environment(parsed_args, context)
        return result

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args, context: EnvironmentContext) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field
            context: Environment the handler may modify

        Returns:
            Exit code from command handler
        """
        handler = self._command_map().get(args.command)
        if not handler:
            logger.error(f"Unknown command: {args.command}")
            return EXIT_ERROR
        return handler(args, context, self.prompt)

    def _flush_environment(self, args, context: EnvironmentContext):
        """Apply recorded changes to the process and, with --eval, the shell."""
        changes = context.apply_to(self.environ)
        if not changes:
            return

        if args.eval:
            print(render_shell_commands(changes))
        else:
            logger.debug(
                f"{len(changes)} variable(s) changed; use --eval to apply them "
                "to the calling shell"
            )


class SysrootCLI(BaseCLI):
    """``sysroot-manager``: manage and activate sysroot profiles."""

    prog = "sysroot-manager"
    description = "Sysroot Manager - GCC version management with sysroots"

    def _add_commands(self, subparsers):
        parser = subparsers.add_parser(
            "add",
            help="Add a new sysroot",
            description="Register a sysroot directory and detect its GCC",
        )
        parser.add_argument("path", help="Sysroot directory")
        parser.add_argument(
            "name", nargs="?", help="Sysroot name (default: directory name)"
        )

        subparsers.add_parser(
            "list",
            help="List all configured sysroots",
            description="List all configured sysroots",
        )

        parser = subparsers.add_parser(
            "select",
            help="Select and activate a sysroot",
            description="Activate a sysroot by name, or choose one interactively",
        )
        parser.add_argument("name", nargs="?", help="Sysroot name")

        parser = subparsers.add_parser(
            "remove",
            help="Remove a sysroot",
            description="Remove a sysroot from the registry",
        )
        parser.add_argument("name", help="Sysroot name")

        subparsers.add_parser(
            "current",
            help="Show currently active sysroot",
            description="Show currently active sysroot",
        )

        subparsers.add_parser(
            "reset",
            help="Reset environment to original state",
            description="Restore PATH and unset all sysroot variables",
        )

        parser = subparsers.add_parser(
            "env",
            help="Generate environment script",
            description="Write a standalone, sourcable activation script",
        )
        parser.add_argument(
            "destfile",
            nargs="?",
            help="Output file, '-' for stdout (default: sysroot_manager.env)",
        )
        parser.add_argument(
            "--profile",
            metavar="NAME",
            help="Sysroot to export (default: the active sysroot)",
        )

    def _command_map(self) -> Dict[str, Callable]:
        from sysrootkit.cli.commands import sysroot

        return {
            "add": sysroot.run_add,
            "list": sysroot.run_list,
            "select": sysroot.run_select,
            "remove": sysroot.run_remove,
            "current": sysroot.run_current,
            "reset": sysroot.run_reset,
            "env": sysroot.run_env,
        }


class CflagCLI(BaseCLI):
    """``cflag-manager``: manage C/C++ standard flags."""

    prog = "cflag-manager"
    description = (
        "cflag-manager - GCC C/C++ compiler flag management\n\n"
        "Activating a sysroot also sets CFLAGS and CXXFLAGS; "
        "whichever command runs last wins."
    )

    def _add_commands(self, subparsers):
        parser = subparsers.add_parser(
            "set",
            help="Set C and/or C++ standard (e.g., c99 c++17)",
            description="Validate standards and export CFLAGS, CXXFLAGS and ASFLAGS",
        )
        parser.add_argument(
            "standards", nargs="+", metavar="STD", help="Language standard"
        )
        parser.add_argument(
            "--permissive",
            action=argparse.BooleanOptionalAction,
            default=None,
            help="Add -fpermissive (asked interactively if omitted)",
        )
        parser.add_argument(
            "--m32",
            action=argparse.BooleanOptionalAction,
            default=None,
            help="Enable 32-bit compilation (asked interactively if omitted)",
        )

        subparsers.add_parser(
            "show",
            help="Display current CFLAGS, CXXFLAGS, and ASFLAGS",
            description="Display current CFLAGS, CXXFLAGS, and ASFLAGS",
        )
        subparsers.add_parser(
            "clear",
            help="Clear all compiler flags",
            description="Unset CFLAGS, CXXFLAGS and ASFLAGS",
        )
        subparsers.add_parser(
            "reset",
            help="Reset flags to original state",
            description="Restore the flags saved before the first 'set'",
        )
        subparsers.add_parser(
            "list",
            help="List all supported standards",
            description="List standards accepted by the host compilers",
        )

        parser = subparsers.add_parser(
            "env",
            help="Write flags to a sourcable file",
            description="Write export statements for the current flags",
        )
        parser.add_argument(
            "destfile",
            nargs="?",
            help="Output file, '-' for stdout (default: cflag_manager.env)",
        )

    def _command_map(self) -> Dict[str, Callable]:
        from sysrootkit.cli.commands import cflags

        return {
            "set": cflags.run_set,
            "show": cflags.run_show,
            "clear": cflags.run_clear,
            "reset": cflags.run_reset,
            "list": cflags.run_list,
            "env": cflags.run_env,
        }


def main():
    """Entry point for ``sysroot-manager``."""
    cli = SysrootCLI()
    sys.exit(cli.run())


def cflag_main():
    """Entry point for ``cflag-manager``."""
    cli = CflagCLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
