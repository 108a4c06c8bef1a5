"""
Standalone environment scripts.

A generated script can be sourced from any POSIX-compatible shell to activate
a sysroot without SysrootKit itself. It defines ``sysroot_reset`` which puts
back the PATH captured when the script was generated.

Scripts are rendered from Jinja2 templates in the ``templates`` directory
next to this module.
"""

import logging
import shlex
from datetime import datetime
from pathlib import Path
from typing import List, Mapping, Optional, Tuple

from jinja2 import Environment, FileSystemLoader, TemplateError

from sysrootkit.core.exceptions import SysrootKitError
from sysrootkit.sysroot.registry import SysrootProfile

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "sysroot_env.sh.j2"

RESET_FUNCTION = "sysroot_reset"
SAVED_PATH_VAR = "_SYSROOT_SAVED_PATH"

_SECTIONS = (
    (
        "Compiler tools",
        (
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
        ),
    ),
    ("Sysroot variables", ("SYSROOT", "CROSS_COMPILE")),
    (
        "pkg-config setup",
        ("PKG_CONFIG_SYSROOT_DIR", "PKG_CONFIG_PATH", "PKG_CONFIG_LIBDIR"),
    ),
    ("Compilation flags", ("CFLAGS", "CXXFLAGS", "LDFLAGS")),
)

_jinja_env: Optional[Environment] = None


def _get_jinja_env() -> Environment:
    """Create the template environment on first use."""
    global _jinja_env
    if _jinja_env is None:
        _jinja_env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        _jinja_env.filters["shquote"] = lambda value: shlex.quote(str(value))
        logger.debug(f"Jinja2 templates initialized from: {TEMPLATE_DIR}")
    return _jinja_env


def _group_sections(env: Mapping[str, str]) -> List[Tuple[str, List[str]]]:
    sections = []
    emitted = set()
    for title, names in _SECTIONS:
        present = [n for n in names if n in env]
        if present:
            sections.append((title, present))
            emitted.update(present)

    extra = [n for n in env if n != "PATH" and n not in emitted]
    if extra:
        sections.append(("Other variables", extra))
    return sections


def generate_env_script(
    profile: SysrootProfile, env: Mapping[str, str], saved_path: str
) -> str:
    """
    Render a sourcable activation script.

    Args:
        profile: Profile the script activates
        env: Output of :func:`~sysrootkit.sysroot.activator.compute_environment`
        saved_path: PATH restored by the embedded reset function

    Returns:
        Script text

    Raises:
        SysrootKitError: If the template cannot be rendered
    """
    try:
        template = _get_jinja_env().get_template(TEMPLATE_NAME)
        return template.render(
            profile=profile,
            env=env,
            saved_path=saved_path,
            sections=_group_sections(env),
            variables=[name for name in env if name != "PATH"],
            reset_function=RESET_FUNCTION,
            saved_path_var=SAVED_PATH_VAR,
            generated_on=datetime.now().astimezone().isoformat(timespec="seconds"),
        )
    except TemplateError as e:
        raise SysrootKitError(f"Failed to render {TEMPLATE_NAME}: {e}") from e
