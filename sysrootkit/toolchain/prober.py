"""
sysrootkit/toolchain/prober.py

Toolchain probing - locates the GCC driver inside a sysroot and extracts its
version and target triplet.
"""

import logging
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from ..core.filesystem import is_executable_file

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"
COMPILER_NAME = "gcc"

_VERSION_PATTERN = re.compile(r"\d+\.\d+\.\d+")

# Environment variable -> tool name (without cross prefix)
COMPANION_TOOLS = (
    ("CXX", "g++"),
    ("AS", "as"),
    ("AR", "ar"),
    ("LD", "ld"),
    ("NM", "nm"),
    ("STRIP", "strip"),
    ("OBJCOPY", "objcopy"),
    ("OBJDUMP", "objdump"),
    ("RANLIB", "ranlib"),
    ("SIZE", "size"),
    ("STRINGS", "strings"),
    ("READELF", "readelf"),
)


@dataclass(frozen=True)
class ProbeResult:
    """
    Outcome of probing a sysroot directory.

    Attributes:
        compiler_path: Located C compiler, or None if none was found
        version: Compiler version (``"unknown"`` if undetectable)
        triplet: Target triplet (``"unknown"`` if undetectable)
    """

    compiler_path: Optional[Path]
    version: str = UNKNOWN
    triplet: str = UNKNOWN

    @property
    def detected(self) -> bool:
        return self.compiler_path is not None


@dataclass(frozen=True)
class ToolSet:
    """
    Compiler driver and its companion binutils.

    Attributes:
        bin_dir: Directory holding the compiler
        prefix: Cross tool prefix (e.g. ``arm-linux-gnueabihf-``), empty for native
        cc: Path of the C compiler
        tools: Environment variable name -> companion tool path
    """

    bin_dir: Path
    prefix: str
    cc: Path
    tools: Dict[str, Path]

    def as_environment(self) -> Dict[str, str]:
        """Map CC and every companion variable to its path string."""
        env = {"CC": str(self.cc)}
        for var, _ in COMPANION_TOOLS:
            env[var] = str(self.tools[var])
        return env


def derive_tool_prefix(compiler_path: Path) -> str:
    """
    Derive the cross tool prefix from a compiler file name.

    ``gcc`` has no prefix; ``arm-linux-gnueabihf-gcc`` yields
    ``arm-linux-gnueabihf-``.
    """
    name = Path(compiler_path).name
    if name == COMPILER_NAME:
        return ""
    if name.endswith(COMPILER_NAME):
        return name[: -len(COMPILER_NAME)]
    return name


def derive_companion_tools(compiler_path: Path) -> ToolSet:
    """
    Compute the full tool set implied by a compiler path.

    Pure function: the filesystem is not consulted.

    Args:
        compiler_path: Path to the C compiler driver

    Returns:
        ToolSet with every companion tool placed next to the compiler
    """
    compiler_path = Path(compiler_path)
    bin_dir = compiler_path.parent
    prefix = derive_tool_prefix(compiler_path)
    tools = {var: bin_dir / f"{prefix}{tool}" for var, tool in COMPANION_TOOLS}
    return ToolSet(bin_dir=bin_dir, prefix=prefix, cc=compiler_path, tools=tools)


class ToolchainProber:
    """
    Locate and interrogate the GCC driver of a sysroot.

    Candidates are tried in order ``bin/gcc``, ``usr/bin/gcc`` and then every
    ``bin/*-gcc`` in lexicographic order; the first executable file wins.
    """

    def __init__(self, timeout: float = 5.0):
        """
        Initialize prober.

        Args:
            timeout: Seconds allowed for each compiler invocation
        """
        self.timeout = timeout

    def locate_compiler(self, sysroot_path: Path) -> Optional[Path]:
        """
        Find the C compiler under a sysroot without running it.

        Args:
            sysroot_path: Sysroot root directory

        Returns:
            Path to the first executable candidate, or None
        """
        sysroot_path = Path(sysroot_path)
        candidates = [
            sysroot_path / "bin" / COMPILER_NAME,
            sysroot_path / "usr" / "bin" / COMPILER_NAME,
        ]
        bin_dir = sysroot_path / "bin"
        if bin_dir.is_dir():
            candidates.extend(sorted(bin_dir.glob(f"*-{COMPILER_NAME}")))

        for candidate in candidates:
            if is_executable_file(candidate):
                logger.debug(f"Found compiler: {candidate}")
                return candidate

        logger.debug(f"No compiler found under {sysroot_path}")
        return None

    def probe(self, sysroot_path: Path) -> ProbeResult:
        """
        Locate the compiler and extract its version and target triplet.

        Detection failure is not an error; the returned result reports
        ``"unknown"`` for every field that could not be determined.

        Args:
            sysroot_path: Sysroot root directory

        Returns:
            ProbeResult
        """
        compiler_path = self.locate_compiler(sysroot_path)
        if compiler_path is None:
            return ProbeResult(compiler_path=None)

        return ProbeResult(
            compiler_path=compiler_path,
            version=self.extract_version(compiler_path),
            triplet=self.extract_target(compiler_path),
        )

    def extract_version(self, compiler_path: Path) -> str:
        """
        Extract ``MAJOR.MINOR.PATCH`` from the first line of ``--version``.

        Args:
            compiler_path: Path to compiler executable

        Returns:
            Version string or ``"unknown"``
        """
        output = self._run(compiler_path, "--version")
        if not output:
            return UNKNOWN

        first_line = output.splitlines()[0]
        match = _VERSION_PATTERN.search(first_line)
        if match:
            logger.debug(f"Extracted version {match.group(0)} from {compiler_path}")
            return match.group(0)

        logger.debug(f"Could not parse version from: {first_line[:200]}")
        return UNKNOWN

    def extract_target(self, compiler_path: Path) -> str:
        """
        Extract the target triplet via ``-dumpmachine``.

        Args:
            compiler_path: Path to compiler executable

        Returns:
            Target triplet or ``"unknown"``
        """
        output = self._run(compiler_path, "-dumpmachine")
        target = output.strip() if output else ""
        return target or UNKNOWN

    def _run(self, compiler_path: Path, flag: str) -> Optional[str]:
        """Run the compiler with one flag and return stdout on success."""
        try:
            result = subprocess.run(
                [str(compiler_path), flag],
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.debug(f"Timeout running {compiler_path} {flag}")
            return None
        except OSError as e:
            logger.debug(f"Failed to run {compiler_path} {flag}: {e}")
            return None

        if result.returncode != 0:
            logger.debug(f"{compiler_path} {flag} returned {result.returncode}")
            return None
        return result.stdout
