"""
Unit tests for state file helpers.
"""

from unittest.mock import patch

import pytest

from sysrootkit.core.filesystem import (
    atomic_write,
    is_executable_file,
    read_single_line,
    remove_file,
    write_single_line,
)


class TestAtomicWrite:
    """Tests for atomic_write."""

    def test_creates_parent_directories(self, tmp_path):
        target = tmp_path / "a" / "b" / "file.json"
        atomic_write(target, '{"sysroots": []}')

        assert target.read_text() == '{"sysroots": []}'

    def test_replaces_existing(self, tmp_path):
        target = tmp_path / "file.txt"
        target.write_text("old")

        atomic_write(target, "new")

        assert target.read_text() == "new"

    def test_bytes_content(self, tmp_path):
        target = tmp_path / "file.bin"
        atomic_write(target, b"\x00\x01")

        assert target.read_bytes() == b"\x00\x01"

    def test_no_temp_file_left_behind(self, tmp_path):
        atomic_write(tmp_path / "file.txt", "content")

        assert [p.name for p in tmp_path.iterdir()] == ["file.txt"]

    def test_failed_replace_keeps_original(self, tmp_path):
        target = tmp_path / "file.txt"
        target.write_text("original")

        with patch("pathlib.Path.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                atomic_write(target, "new")

        assert target.read_text() == "original"
        assert [p.name for p in tmp_path.iterdir()] == ["file.txt"]


class TestSingleLineFiles:
    """Tests for single-line state files."""

    def test_round_trip(self, tmp_path):
        marker = tmp_path / "current"
        write_single_line(marker, "arm-linux")

        assert marker.read_text() == "arm-linux\n"
        assert read_single_line(marker) == "arm-linux"

    def test_missing_file(self, tmp_path):
        assert read_single_line(tmp_path / "missing") is None

    def test_remove_file(self, tmp_path):
        marker = tmp_path / "current"
        marker.write_text("x\n")

        assert remove_file(marker) is True
        assert remove_file(marker) is False


class TestIsExecutableFile:
    """Tests for is_executable_file."""

    def test_executable(self, tmp_path):
        exe = tmp_path / "tool"
        exe.write_text("#!/bin/sh\n")
        exe.chmod(0o755)

        assert is_executable_file(exe)

    def test_not_executable(self, tmp_path):
        plain = tmp_path / "tool"
        plain.write_text("")
        plain.chmod(0o644)

        assert not is_executable_file(plain)

    def test_directory(self, tmp_path):
        assert not is_executable_file(tmp_path)
