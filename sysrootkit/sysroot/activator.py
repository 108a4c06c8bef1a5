"""
Sysroot environment activation.

The activator turns a registered profile into the full set of compiler,
sysroot and pkg-config variables, applies it to an
:class:`~sysrootkit.core.environment.EnvironmentContext` and can undo the
activation using the PATH backup kept by the session store.

Example:
    >>> context = EnvironmentContext.from_environ(os.environ)
    >>> activator = EnvironmentActivator(registry, session, context)
    >>> activator.select("arm-linux")
    >>> context.get("CROSS_COMPILE")
    'arm-linux-gnueabihf-'
    >>> activator.reset()
"""

import logging
from pathlib import Path
from typing import Dict, Optional

from sysrootkit.core.environment import EnvironmentContext
from sysrootkit.core.exceptions import (
    PersistenceError,
    ToolchainNotFoundError,
    ValidationError,
)
from sysrootkit.core.filesystem import atomic_write
from sysrootkit.core.prompt import Prompt
from sysrootkit.sysroot.envscript import generate_env_script
from sysrootkit.sysroot.registry import ProfileRegistry, SysrootProfile
from sysrootkit.sysroot.session import SessionStore
from sysrootkit.toolchain.prober import ToolchainProber, ToolSet, derive_companion_tools

logger = logging.getLogger(__name__)

# Every variable owned by an active sysroot, PATH excluded
SYSROOT_VARIABLES = (
    "CC",
    "CXX",
    "AS",
    "AR",
    "LD",
    "NM",
    "STRIP",
    "OBJCOPY",
    "OBJDUMP",
    "RANLIB",
    "SIZE",
    "STRINGS",
    "READELF",
    "SYSROOT",
    "CROSS_COMPILE",
    "PKG_CONFIG_SYSROOT_DIR",
    "PKG_CONFIG_PATH",
    "PKG_CONFIG_LIBDIR",
    "CFLAGS",
    "CXXFLAGS",
    "LDFLAGS",
)

CANCEL_ANSWERS = ("q", "Q")


def pkg_config_dirs(sysroot_path: Path, include_lib: bool = True) -> str:
    """Build a colon-separated pkg-config search path inside a sysroot."""
    dirs = [
        f"{sysroot_path}/usr/lib/pkgconfig",
        f"{sysroot_path}/usr/share/pkgconfig",
    ]
    if include_lib:
        dirs.append(f"{sysroot_path}/lib/pkgconfig")
    return ":".join(dirs)


def compute_environment(
    sysroot_path: Path, tools: ToolSet, base_path: Optional[str]
) -> Dict[str, str]:
    """
    Compute every variable describing an active sysroot.

    Args:
        sysroot_path: Canonical sysroot path
        tools: Compiler and companion tools of the sysroot
        base_path: PATH to prepend the toolchain bin directory to

    Returns:
        Mapping of all SYSROOT_VARIABLES plus PATH
    """
    sysroot = str(sysroot_path)
    sysroot_flag = f"--sysroot={sysroot}"

    env = tools.as_environment()
    env.update(
        {
            "SYSROOT": sysroot,
            "CROSS_COMPILE": tools.prefix,
            "PKG_CONFIG_SYSROOT_DIR": sysroot,
            "PKG_CONFIG_PATH": pkg_config_dirs(sysroot_path),
            "PKG_CONFIG_LIBDIR": pkg_config_dirs(sysroot_path, include_lib=False),
            "CFLAGS": sysroot_flag,
            "CXXFLAGS": sysroot_flag,
            "LDFLAGS": sysroot_flag,
            "PATH": f"{tools.bin_dir}:{base_path}" if base_path else str(tools.bin_dir),
        }
    )
    return env


class EnvironmentActivator:
    """
    Activate, inspect and reset sysroot environments.

    Attributes:
        registry: Profile registry used for lookups
        session: Store for the active marker and PATH backup
        context: Environment the activator reads and mutates
        prober: Used to locate the compiler of a profile
    """

    def __init__(
        self,
        registry: ProfileRegistry,
        session: SessionStore,
        context: EnvironmentContext,
        prober: Optional[ToolchainProber] = None,
    ):
        self.registry = registry
        self.session = session
        self.context = context
        self.prober = prober or registry.prober

    def tools_for(self, profile: SysrootProfile) -> ToolSet:
        """
        Locate the toolchain of a profile.

        Raises:
            ToolchainNotFoundError: If the sysroot holds no compiler
        """
        compiler_path = self.prober.locate_compiler(profile.path)
        if compiler_path is None:
            raise ToolchainNotFoundError(str(profile.path))
        return derive_companion_tools(compiler_path)

    def select(
        self, name: Optional[str] = None, prompt: Optional[Prompt] = None
    ) -> Optional[SysrootProfile]:
        """
        Activate a profile by name or by interactive choice.

        Args:
            name: Profile name; when omitted the user picks from a numbered list
            prompt: Prompt used for the interactive choice

        Returns:
            The activated profile, or None if nothing was selected

        Raises:
            ProfileNotFoundError: If name is unknown
            ValidationError: If the interactive answer is invalid
            ToolchainNotFoundError: If the profile has no usable compiler
        """
        if name:
            profile = self.registry.get(name)
        else:
            if prompt is None:
                raise ValidationError("Sysroot name is required")
            profile = self._choose(prompt)
            if profile is None:
                return None

        self.activate(profile)
        return profile

    def _choose(self, prompt: Prompt) -> Optional[SysrootProfile]:
        profiles = self.registry.list()
        if not profiles:
            logger.info("No sysroots configured. Use 'sysroot-manager add' to add one.")
            return None

        lines = ["Select a sysroot:", "=================="]
        for index, profile in enumerate(profiles, start=1):
            lines.extend(
                [
                    f"{index}) {profile.name}",
                    f"   Path: {profile.path}",
                    f"   GCC Version: {profile.compiler_version}",
                    f"   Target: {profile.target_triplet}",
                    "",
                ]
            )
        prompt.show("\n".join(lines))

        answer = prompt.ask(
            f"Enter selection (1-{len(profiles)}, or 'q' to quit): "
        )
        if answer is None or answer.strip() in CANCEL_ANSWERS:
            logger.info("Selection cancelled")
            return None

        answer = answer.strip()
        if not answer.isdigit() or not 1 <= int(answer) <= len(profiles):
            raise ValidationError(f"Invalid selection: {answer}")
        return profiles[int(answer) - 1]

    def activate(self, profile: SysrootProfile) -> Dict[str, str]:
        """
        Apply a profile's environment.

        PATH is backed up on the first activation only; later activations
        build PATH from the backup so toolchain directories do not pile up.

        Returns:
            The variables that were set
        """
        tools = self.tools_for(profile)

        self.session.backup_path(self.context.get("PATH", ""))
        base_path = self.session.path_backup()

        env = compute_environment(profile.path, tools, base_path)
        self.context.update(env)
        self.session.set_active_name(profile.name)

        logger.info(f"Environment set for sysroot '{profile.name}'")
        logger.info(f"  GCC: {tools.cc}")
        logger.info(f"  Sysroot: {profile.path}")
        logger.info(f"  Target: {profile.target_triplet}")
        return env

    def current(self) -> Optional[SysrootProfile]:
        """
        Return the active profile.

        A marker that names a removed profile is reported as a warning.
        """
        name = self.session.active_name()
        if name is None:
            return None

        profile = self.registry.lookup(name)
        if profile is None:
            logger.warning(f"Current sysroot '{name}' not found in configuration")
        return profile

    def reset(self) -> bool:
        """
        Undo activation.

        Returns:
            True if an active environment was reset, False if already inactive
        """
        active_name = self.session.active_name()
        if active_name is None and not self.session.has_path_backup():
            logger.info("No sysroot environment active")
            return False

        saved_path = self.session.path_backup()
        if saved_path is not None:
            self.context.set("PATH", saved_path)
            logger.info("PATH restored")
        else:
            logger.warning("No PATH backup found")

        self.context.unset(*SYSROOT_VARIABLES)
        self.session.clear_active_name()
        self.session.clear_path_backup()

        logger.info("Environment reset to original state")
        return True

    def render_env_script(self, name: Optional[str] = None) -> str:
        """
        Generate a standalone activation script.

        Args:
            name: Profile name (default: the active profile)

        Raises:
            ValidationError: If no name is given and nothing is active
            ProfileNotFoundError: If the profile is unknown
            ToolchainNotFoundError: If the profile has no usable compiler
        """
        if name:
            profile = self.registry.get(name)
        else:
            profile = self.current()
            if profile is None:
                raise ValidationError(
                    "No sysroot active; pass a sysroot name to export"
                )

        tools = self.tools_for(profile)
        saved_path = self.session.path_backup()
        if saved_path is None:
            saved_path = self.context.get("PATH", "")

        env = compute_environment(profile.path, tools, saved_path)
        return generate_env_script(profile, env, saved_path)

    def export_env_file(self, dest: Path, name: Optional[str] = None) -> Path:
        """
        Write a standalone activation script to dest.

        Returns:
            The written path
        """
        script = self.render_env_script(name)
        dest = Path(dest)
        try:
            atomic_write(dest, script)
        except OSError as e:
            raise PersistenceError(f"Cannot write {dest}: {e}") from e

        logger.info(f"Environment file written to {dest}")
        return dest
