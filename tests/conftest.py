"""
Pytest configuration and shared fixtures for SysrootKit tests.
"""

import logging

import pytest

from sysrootkit.core.environment import EnvironmentContext
from sysrootkit.sysroot.registry import ProfileRegistry
from sysrootkit.sysroot.session import SessionStore

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.toolchains import (
    cross_sysroot,
    native_sysroot,
    empty_sysroot,
)
from tests.fixtures.directories import (
    isolated_home,
    isolated_settings,
)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def restore_root_log_level():
    """Undo logging.basicConfig calls made by CLI runs."""
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)
    for handler in list(root.handlers):
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)


@pytest.fixture
def context() -> EnvironmentContext:
    """Environment with a plain PATH and nothing else."""
    return EnvironmentContext({"PATH": "/usr/local/bin:/usr/bin:/bin"})


@pytest.fixture
def registry(isolated_settings) -> ProfileRegistry:
    """Empty profile registry in the isolated home."""
    return ProfileRegistry(
        isolated_settings.registry_file,
        lock_path=isolated_settings.lock_dir / "registry.lock",
        lock_timeout=5,
    )


@pytest.fixture
def session(isolated_settings) -> SessionStore:
    """Session store in the isolated home."""
    return SessionStore(
        isolated_settings.active_file, isolated_settings.path_backup_file
    )
