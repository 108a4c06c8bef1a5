"""
Compiler flag command implementations.

Each ``run_*`` function handles one ``cflag-manager`` sub-command.
"""

import logging
from pathlib import Path

from sysrootkit.cli.utils import (
    STDOUT_DEST,
    build_flag_manager,
    output_stream,
    print_header,
    require_executable,
    resolve_settings,
)
from sysrootkit.core.environment import EnvironmentContext
from sysrootkit.core.prompt import Prompt

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = "cflag_manager.env"


def _manager(args, context, prompt=None, needs_compilers=False):
    settings = resolve_settings(args)
    if needs_compilers:
        require_executable(settings.c_compiler)
        require_executable(settings.cxx_compiler)
    return build_flag_manager(settings, context, prompt=prompt)


def _print_flags(flags, stream):
    print("Current compiler flags:", file=stream)
    print(f"CFLAGS: {flags.cflags or '<not set>'}", file=stream)
    print(f"CXXFLAGS: {flags.cxxflags or '<not set>'}", file=stream)
    print(f"ASFLAGS: {flags.asflags or '<not set>'}", file=stream)


def run_set(args, context: EnvironmentContext, prompt: Prompt) -> int:
    """Set flags for one C and/or one C++ standard."""
    manager = _manager(args, context, prompt=prompt, needs_compilers=True)
    flags = manager.set_standard(
        args.standards, permissive=args.permissive, m32=args.m32
    )
    _print_flags(flags, output_stream(args))
    return 0


def run_show(args, context: EnvironmentContext, prompt: Prompt) -> int:
    """Display the managed flag variables."""
    _print_flags(_manager(args, context).show(), output_stream(args))
    return 0


def run_clear(args, context: EnvironmentContext, prompt: Prompt) -> int:
    """Unset all managed flag variables."""
    _manager(args, context).clear()
    logger.info("All compiler flags cleared")
    return 0


def run_reset(args, context: EnvironmentContext, prompt: Prompt) -> int:
    """Restore flags from the backup."""
    _manager(args, context).reset()
    return 0


def run_list(args, context: EnvironmentContext, prompt: Prompt) -> int:
    """List the standards accepted by the host compilers."""
    supported = _manager(args, context, needs_compilers=True).list_supported_standards()

    out = output_stream(args)
    print_header("Supported C standards:", file=out)
    for standard in supported.c:
        print(f"  {standard}", file=out)
    print(file=out)
    print_header("Supported C++ standards:", file=out)
    for standard in supported.cpp:
        print(f"  {standard}", file=out)
    return 0


def run_env(args, context: EnvironmentContext, prompt: Prompt) -> int:
    """Write export statements for the current flags."""
    manager = _manager(args, context)
    dest = args.destfile or DEFAULT_ENV_FILE

    if dest == STDOUT_DEST:
        output_stream(args).write(manager.render_env_script())
    else:
        manager.export_env_file(Path(dest))
    return 0
