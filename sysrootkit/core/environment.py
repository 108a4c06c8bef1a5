"""
Process-owned view of environment variables.

Activation and flag logic never touch ``os.environ`` directly. They read and
mutate an :class:`EnvironmentContext`, and the CLI flushes the recorded
changes to the real process environment (and optionally to the calling shell)
once a command has finished.

Example:
    >>> context = EnvironmentContext({"PATH": "/usr/bin"})
    >>> context.set("CC", "/opt/arm/bin/arm-linux-gnueabihf-gcc")
    >>> context.unset("CFLAGS")
    >>> context.changes()
    {'CC': '/opt/arm/bin/arm-linux-gnueabihf-gcc'}
"""

import logging
import shlex
from typing import Dict, Iterable, List, Mapping, MutableMapping, Optional

logger = logging.getLogger(__name__)


class EnvironmentContext:
    """
    Mutable set of environment variables with change tracking.

    Attributes:
        initial: Snapshot the context was created from
    """

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self.initial: Dict[str, str] = dict(initial or {})
        self._values: Dict[str, str] = dict(self.initial)

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> "EnvironmentContext":
        """Create a context from a snapshot of a real environment."""
        return cls(environ)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._values.get(name, default)

    def set(self, name: str, value: str) -> None:
        self._values[name] = value
        logger.debug(f"set {name}={value}")

    def unset(self, *names: str) -> None:
        for name in names:
            if self._values.pop(name, None) is not None:
                logger.debug(f"unset {name}")

    def update(self, values: Mapping[str, str]) -> None:
        for name, value in values.items():
            self.set(name, value)

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def as_dict(self) -> Dict[str, str]:
        return dict(self._values)

    def changes(self) -> Dict[str, Optional[str]]:
        """
        Compute the difference from the initial snapshot.

        Returns:
            Mapping of variable name to its new value, or None when the
            variable was removed. Variables are ordered by first appearance.
        """
        result: Dict[str, Optional[str]] = {}
        for name, value in self._values.items():
            if self.initial.get(name) != value:
                result[name] = value
        for name in self.initial:
            if name not in self._values:
                result[name] = None
        return result

    def apply_to(self, environ: MutableMapping[str, str]) -> Dict[str, Optional[str]]:
        """
        Flush recorded changes into a real environment mapping.

        Args:
            environ: Target mapping, usually ``os.environ``

        Returns:
            The changes that were applied
        """
        changes = self.changes()
        for name, value in changes.items():
            if value is None:
                environ.pop(name, None)
            else:
                environ[name] = value
        return changes


def render_export(name: str, value: str) -> str:
    """Render a single POSIX shell ``export`` statement."""
    return f"export {name}={shlex.quote(value)}"


def render_exports(variables: Mapping[str, str], order: Iterable[str]) -> List[str]:
    """
    Render export statements for the non-empty variables in order.

    Args:
        variables: Variable values
        order: Variable names in the order they should be emitted

    Returns:
        List of shell statements
    """
    lines = []
    for name in order:
        value = variables.get(name)
        if value:
            lines.append(render_export(name, value))
    return lines


def render_shell_commands(changes: Mapping[str, Optional[str]]) -> str:
    """
    Render recorded changes as shell code suitable for ``eval``.

    Args:
        changes: Output of :meth:`EnvironmentContext.changes`

    Returns:
        Newline-separated ``export``/``unset`` statements
    """
    lines = []
    for name, value in changes.items():
        if value is None:
            lines.append(f"unset {name}")
        else:
            lines.append(render_export(name, value))
    return "\n".join(lines)
