"""
Sysroot command implementations.

Each ``run_*`` function handles one ``sysroot-manager`` sub-command. Errors
are raised as SysrootKit exceptions and turned into exit codes by the CLI.
"""

import logging
from pathlib import Path

from sysrootkit.cli.utils import (
    STDOUT_DEST,
    build_activator,
    build_registry,
    output_stream,
    print_header,
    resolve_settings,
)
from sysrootkit.core.environment import EnvironmentContext
from sysrootkit.core.prompt import Prompt

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = "sysroot_manager.env"


def _print_profile(profile, out, added: bool = True):
    print(f"  Path: {profile.path}", file=out)
    print(f"  GCC Version: {profile.compiler_version}", file=out)
    print(f"  Target: {profile.target_triplet}", file=out)
    if added:
        print(f"  Added: {profile.added_at}", file=out)


def run_add(args, context: EnvironmentContext, prompt: Prompt) -> int:
    """Register a sysroot directory."""
    registry = build_registry(resolve_settings(args))
    profile = registry.add(Path(args.path), args.name)

    logger.info(f"  Path: {profile.path}")
    logger.info(f"  GCC Version: {profile.compiler_version}")
    logger.info(f"  Target: {profile.target_triplet}")
    return 0


def run_list(args, context: EnvironmentContext, prompt: Prompt) -> int:
    """List registered sysroots."""
    registry = build_registry(resolve_settings(args))
    profiles = registry.list()

    if not profiles:
        logger.info("No sysroots configured")
        return 0

    out = output_stream(args)
    print_header("Available Sysroots:", file=out)
    for profile in profiles:
        print(f"[{profile.name}]", file=out)
        _print_profile(profile, out)
        print(file=out)
    return 0


def run_select(args, context: EnvironmentContext, prompt: Prompt) -> int:
    """Activate a sysroot by name or interactively."""
    activator = build_activator(resolve_settings(args), context)
    activator.select(args.name, prompt=prompt)
    return 0


def run_remove(args, context: EnvironmentContext, prompt: Prompt) -> int:
    """Remove a sysroot from the registry."""
    registry = build_registry(resolve_settings(args))
    registry.remove(args.name)
    return 0


def run_current(args, context: EnvironmentContext, prompt: Prompt) -> int:
    """Show the active sysroot."""
    activator = build_activator(resolve_settings(args), context)

    if activator.session.active_name() is None:
        logger.info("No sysroot currently active")
        return 0

    profile = activator.current()
    if profile is not None:
        out = output_stream(args)
        print("Currently Active Sysroot:", file=out)
        print(f"  Name: {profile.name}", file=out)
        _print_profile(profile, out, added=False)
    return 0


def run_reset(args, context: EnvironmentContext, prompt: Prompt) -> int:
    """Restore the environment from before activation."""
    activator = build_activator(resolve_settings(args), context)
    activator.reset()
    return 0


def run_env(args, context: EnvironmentContext, prompt: Prompt) -> int:
    """Generate a standalone activation script."""
    activator = build_activator(resolve_settings(args), context)
    dest = args.destfile or DEFAULT_ENV_FILE

    if dest == STDOUT_DEST:
        output_stream(args).write(activator.render_env_script(args.profile))
    else:
        activator.export_env_file(Path(dest), args.profile)
    return 0
