"""
Compiler flag set management.

Manages CFLAGS, CXXFLAGS and ASFLAGS for a chosen C and/or C++ language
standard, with optional ``-fpermissive`` and 32-bit x86 code generation. The
flags in effect before the first change are saved to a backup file so they
can be restored later.

Example:
    >>> manager = FlagSetManager(context, Path("~/.sysroot-manager/cflags_backup"))
    >>> manager.set_standard(["c11", "c++17"], permissive=False, m32=False)
    FlagSet(cflags='-std=c11', cxxflags='-std=c++17', asflags='')
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Optional

from sysrootkit.core.environment import EnvironmentContext, render_exports
from sysrootkit.core.exceptions import (
    PersistenceError,
    UnsupportedStandardError,
    ValidationError,
)
from sysrootkit.core.filesystem import atomic_write, remove_file
from sysrootkit.core.prompt import Prompt
from sysrootkit.flags.standards import (
    StandardsProber,
    SupportedStandards,
    is_cpp_standard,
)

logger = logging.getLogger(__name__)

FLAG_VARIABLES = ("CFLAGS", "CXXFLAGS", "ASFLAGS")

PERMISSIVE_FLAG = "-fpermissive"
M32_FLAGS = "-m32 -Wa,--32 -Wl,-m,elf_i386"
M32_ASFLAGS = "-Wa,--32"


@dataclass(frozen=True)
class FlagSet:
    """Values of the three managed variables (None means unset)."""

    cflags: Optional[str] = None
    cxxflags: Optional[str] = None
    asflags: Optional[str] = None

    def as_environment(self) -> Dict[str, Optional[str]]:
        return {
            "CFLAGS": self.cflags,
            "CXXFLAGS": self.cxxflags,
            "ASFLAGS": self.asflags,
        }


def compose_flags(
    c_standard: Optional[str],
    cpp_standard: Optional[str],
    permissive: bool = False,
    m32: bool = False,
) -> FlagSet:
    """
    Build the flag set for the chosen standards and options.

    ASFLAGS is ``-Wa,--32`` in 32-bit mode and empty otherwise; it is set
    once regardless of how many languages were requested.
    """

    def language_flags(standard: Optional[str]) -> Optional[str]:
        if not standard:
            return None
        parts = [f"-std={standard}"]
        if permissive:
            parts.append(PERMISSIVE_FLAG)
        if m32:
            parts.append(M32_FLAGS)
        return " ".join(parts)

    return FlagSet(
        cflags=language_flags(c_standard),
        cxxflags=language_flags(cpp_standard),
        asflags=M32_ASFLAGS if m32 else "",
    )


class FlagSetManager:
    """
    Set, show, clear and restore compiler flags.

    Attributes:
        context: Environment holding the flag variables
        backup_file: Write-once backup of the flags prior to the first set
        standards: Source of supported standards
        prompt: Asks the permissive and 32-bit questions when not preset
    """

    def __init__(
        self,
        context: EnvironmentContext,
        backup_file: Path,
        standards: Optional[StandardsProber] = None,
        prompt: Optional[Prompt] = None,
    ):
        self.context = context
        self.backup_file = Path(backup_file)
        self.standards = standards or StandardsProber()
        self.prompt = prompt

    def list_supported_standards(self) -> SupportedStandards:
        return self.standards.supported()

    def set_standard(
        self,
        tokens: Iterable[str],
        permissive: Optional[bool] = None,
        m32: Optional[bool] = None,
    ) -> FlagSet:
        """
        Set flags for the given C and/or C++ standards.

        Args:
            tokens: Standard names such as ``c11`` or ``gnu++17``; the last
                token of each language wins
            permissive: Add ``-fpermissive`` (asked via the prompt if None)
            m32: Enable 32-bit compilation (asked via the prompt if None)

        Returns:
            The flags now in effect

        Raises:
            ValidationError: If no standard is given
            UnsupportedStandardError: If a token is not supported
        """
        tokens = [t for t in tokens if t]
        if not tokens:
            raise ValidationError("At least one valid C or C++ standard is required")

        supported = self.list_supported_standards()
        c_standard = None
        cpp_standard = None
        for token in tokens:
            if token not in supported:
                raise UnsupportedStandardError(token, supported.all())
            if is_cpp_standard(token):
                if cpp_standard:
                    logger.debug(f"C++ standard {cpp_standard} replaced by {token}")
                cpp_standard = token
            else:
                if c_standard:
                    logger.debug(f"C standard {c_standard} replaced by {token}")
                c_standard = token

        if permissive is None:
            permissive = self._confirm(f"Add {PERMISSIVE_FLAG} flag?")
        if m32 is None:
            m32 = self._confirm("Enable 32-bit compilation?")

        self.backup()
        self.clear()

        flags = compose_flags(c_standard, cpp_standard, permissive, m32)
        for name, value in flags.as_environment().items():
            if value is not None:
                self.context.set(name, value)

        logger.info("Compiler flags set successfully!")
        return flags

    def _confirm(self, question: str) -> bool:
        if self.prompt is None:
            return False
        return self.prompt.confirm(question, default=False)

    def show(self) -> FlagSet:
        """Return the flags currently in the environment."""
        return FlagSet(
            cflags=self.context.get("CFLAGS"),
            cxxflags=self.context.get("CXXFLAGS"),
            asflags=self.context.get("ASFLAGS"),
        )

    def clear(self) -> None:
        """Unset all managed flag variables without touching the backup."""
        self.context.unset(*FLAG_VARIABLES)
        logger.debug("All compiler flags cleared")

    def has_backup(self) -> bool:
        return self.backup_file.exists()

    def backup(self) -> bool:
        """
        Save the current flags unless a backup already exists.

        Returns:
            True if a backup was written
        """
        if self.has_backup():
            return False

        lines = [f"{name}={self.context.get(name, '')}" for name in FLAG_VARIABLES]
        try:
            atomic_write(self.backup_file, "\n".join(lines) + "\n")
        except OSError as e:
            raise PersistenceError(f"Cannot write {self.backup_file}: {e}") from e

        logger.info("Compiler flags backed up")
        return True

    def _read_backup(self) -> Dict[str, str]:
        try:
            text = self.backup_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Cannot read {self.backup_file}: {e}") from e

        values = {}
        for line in text.splitlines():
            name, sep, value = line.partition("=")
            if sep and name in FLAG_VARIABLES:
                values[name] = value
        return values

    def reset(self) -> bool:
        """
        Restore the flags saved before the first set.

        Without a backup the flags are cleared instead.

        Returns:
            True if flags were restored from a backup
        """
        if not self.has_backup():
            logger.warning("No backup found, clearing flags instead")
            self.clear()
            return False

        values = self._read_backup()
        for name in FLAG_VARIABLES:
            value = values.get(name)
            if value:
                self.context.set(name, value)
            else:
                self.context.unset(name)

        try:
            remove_file(self.backup_file)
        except OSError as e:
            raise PersistenceError(f"Cannot remove {self.backup_file}: {e}") from e

        logger.info("Compiler flags restored")
        return True

    def render_env_script(self) -> str:
        """Render export statements for the non-empty flag variables."""
        lines = ["# Sourcable environment file generated by cflag-manager"]
        lines.extend(render_exports(self.context.as_dict(), FLAG_VARIABLES))
        return "\n".join(lines) + "\n"

    def export_env_file(self, dest: Path) -> Path:
        """Write the flag export script to dest."""
        dest = Path(dest)
        try:
            atomic_write(dest, self.render_env_script())
        except OSError as e:
            raise PersistenceError(f"Cannot write {dest}: {e}") from e

        logger.info(f"Environment file written to {dest}")
        return dest
