"""
Language standard probing.

A standard counts as supported when the host compiler preprocesses an empty
input with ``-std=<standard>`` without error.
"""

import logging
import os
import subprocess
from dataclasses import dataclass, field
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

C_STANDARD_CANDIDATES = (
    "c89",
    "c90",
    "c99",
    "c11",
    "c17",
    "c18",
    "c2x",
    "gnu89",
    "gnu90",
    "gnu99",
    "gnu11",
    "gnu17",
    "gnu18",
    "gnu2x",
)

CPP_STANDARD_CANDIDATES = (
    "c++98",
    "c++03",
    "c++11",
    "c++14",
    "c++17",
    "c++20",
    "c++23",
    "c++2a",
    "c++2b",
    "gnu++98",
    "gnu++03",
    "gnu++11",
    "gnu++14",
    "gnu++17",
    "gnu++20",
    "gnu++23",
    "gnu++2a",
    "gnu++2b",
)

CPP_PREFIXES = ("c++", "gnu++")


def is_cpp_standard(standard: str) -> bool:
    """Classify a standard token as C++ (True) or C (False)."""
    return standard.startswith(CPP_PREFIXES)


@dataclass
class SupportedStandards:
    """Standards accepted by the host compilers, in candidate order."""

    c: List[str] = field(default_factory=list)
    cpp: List[str] = field(default_factory=list)

    def __contains__(self, standard: str) -> bool:
        return standard in self.c or standard in self.cpp

    def all(self) -> List[str]:
        return self.c + self.cpp

    def to_dict(self) -> Dict[str, List[str]]:
        return {"c": list(self.c), "cpp": list(self.cpp)}


class StandardsProber:
    """
    Ask the host compilers which ``-std=`` values they accept.

    Results are cached for the lifetime of the instance.
    """

    def __init__(
        self, c_compiler: str = "gcc", cxx_compiler: str = "g++", timeout: float = 5.0
    ):
        self.c_compiler = c_compiler
        self.cxx_compiler = cxx_compiler
        self.timeout = timeout
        self._cache: Optional[SupportedStandards] = None

    def accepts(self, compiler: str, language: str, standard: str) -> bool:
        """
        Check whether a compiler accepts a standard flag.

        Args:
            compiler: Compiler executable
            language: ``c`` or ``c++`` (passed to ``-x``)
            standard: Standard name without ``-std=``
        """
        cmd = [compiler, f"-std={standard}", "-E", "-x", language, os.devnull]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.debug(f"Timeout probing {' '.join(cmd)}")
            return False
        except OSError as e:
            logger.debug(f"Failed to probe {compiler}: {e}")
            return False

        return result.returncode == 0

    def supported(self) -> SupportedStandards:
        """Probe every candidate standard once and cache the result."""
        if self._cache is None:
            self._cache = SupportedStandards(
                c=[
                    s
                    for s in C_STANDARD_CANDIDATES
                    if self.accepts(self.c_compiler, "c", s)
                ],
                cpp=[
                    s
                    for s in CPP_STANDARD_CANDIDATES
                    if self.accepts(self.cxx_compiler, "c++", s)
                ],
            )
            logger.debug(
                f"Supported standards: {len(self._cache.c)} C, "
                f"{len(self._cache.cpp)} C++"
            )
        return self._cache
