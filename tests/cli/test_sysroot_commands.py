"""
Tests for sysroot-manager commands run through the CLI.
"""

import pytest

from sysrootkit.cli.parser import SysrootCLI
from sysrootkit.core.prompt import ScriptedPrompt
from tests.fixtures.toolchains import CROSS_PREFIX, CROSS_TRIPLET, CROSS_VERSION

ORIGINAL_PATH = "/usr/bin:/bin"


@pytest.fixture
def environ():
    return {"PATH": ORIGINAL_PATH, "HOME": "/home/user"}


@pytest.fixture
def run(isolated_home, environ):
    """Run sysroot-manager against the isolated home and a fake environment."""

    def _run(*args, answers=()):
        cli = SysrootCLI(environ=environ, prompt=ScriptedPrompt(answers))
        return cli.run(list(args))

    return _run


@pytest.fixture
def with_arm(run, cross_sysroot, capsys):
    assert run("add", str(cross_sysroot), "arm") == 0
    capsys.readouterr()
    return cross_sysroot.resolve()


class TestAddAndList:
    """Tests for add, list and remove."""

    def test_add_reports_detection(self, run, cross_sysroot, capsys):
        assert run("add", str(cross_sysroot), "arm") == 0

        err = capsys.readouterr().err
        assert "Added sysroot 'arm'" in err
        assert CROSS_VERSION in err
        assert CROSS_TRIPLET in err

    def test_list(self, run, with_arm, capsys):
        assert run("list") == 0

        out = capsys.readouterr().out
        assert "Available Sysroots:" in out
        assert "[arm]" in out
        assert f"Path: {with_arm}" in out
        assert f"GCC Version: {CROSS_VERSION}" in out

    def test_list_empty(self, run, capsys):
        assert run("list") == 0

        captured = capsys.readouterr()
        assert "No sysroots configured" in captured.err
        assert captured.out == ""

    def test_add_duplicate(self, run, with_arm, capsys):
        assert run("add", str(with_arm), "other") == 1

        assert "already exists" in capsys.readouterr().err

    def test_add_missing_directory(self, run, tmp_path, capsys):
        assert run("add", str(tmp_path / "missing")) == 1

        assert "ERROR: Sysroot directory does not exist" in capsys.readouterr().err

    def test_remove(self, run, with_arm, capsys):
        assert run("remove", "arm") == 0
        assert run("list") == 0

        assert "[arm]" not in capsys.readouterr().out

    def test_remove_unknown(self, run, capsys):
        assert run("remove", "nope") == 1

        assert "Sysroot 'nope' not found" in capsys.readouterr().err


class TestSelectAndReset:
    """Tests for select, current and reset."""

    def test_select_updates_environment(self, run, with_arm, environ):
        assert run("select", "arm") == 0

        assert environ["CC"] == str(with_arm / "bin" / f"{CROSS_PREFIX}gcc")
        assert environ["PATH"] == f"{with_arm / 'bin'}:{ORIGINAL_PATH}"
        assert environ["HOME"] == "/home/user"

    def test_select_eval_prints_exports(self, run, with_arm, capsys):
        assert run("--eval", "select", "arm") == 0

        lines = capsys.readouterr().out.splitlines()
        assert f"export CROSS_COMPILE={CROSS_PREFIX}" in lines
        assert f"export SYSROOT={with_arm}" in lines
        assert all(line.startswith("export ") for line in lines)

    def test_select_without_eval_prints_nothing(self, run, with_arm, capsys):
        assert run("select", "arm") == 0

        assert capsys.readouterr().out == ""

    def test_select_unknown(self, run, with_arm, environ, capsys):
        before = dict(environ)

        assert run("--eval", "select", "nope") == 1

        captured = capsys.readouterr()
        assert environ == before
        assert captured.out == ""
        assert "not found" in captured.err

    def test_select_interactive(self, run, with_arm, environ):
        assert run("select", answers=["1"]) == 0

        assert environ["SYSROOT"] == str(with_arm)

    def test_select_interactive_cancel(self, run, with_arm, environ):
        assert run("select", answers=["q"]) == 0

        assert "SYSROOT" not in environ

    def test_select_without_compiler(self, run, empty_sysroot, capsys):
        run("add", str(empty_sysroot), "headers")

        assert run("select", "headers") == 1
        assert "No GCC found" in capsys.readouterr().err

    def test_current(self, run, with_arm, capsys):
        run("select", "arm")
        capsys.readouterr()

        assert run("current") == 0

        out = capsys.readouterr().out
        assert "Currently Active Sysroot:" in out
        assert "Name: arm" in out
        assert f"Target: {CROSS_TRIPLET}" in out

    def test_current_inactive(self, run, capsys):
        assert run("current") == 0

        assert "No sysroot currently active" in capsys.readouterr().err

    def test_reset_eval(self, run, with_arm, environ, capsys):
        """Test reset emits commands restoring the original environment."""
        run("select", "arm")
        capsys.readouterr()

        assert run("--eval", "reset") == 0

        lines = capsys.readouterr().out.splitlines()
        assert f"export PATH={ORIGINAL_PATH}" in lines
        assert "unset CC" in lines
        assert "unset PKG_CONFIG_PATH" in lines
        assert environ == {"PATH": ORIGINAL_PATH, "HOME": "/home/user"}

    def test_reset_when_inactive(self, run, environ, capsys):
        assert run("--eval", "reset") == 0

        assert capsys.readouterr().out == ""
        assert environ == {"PATH": ORIGINAL_PATH, "HOME": "/home/user"}


class TestEnvCommand:
    """Tests for env script generation."""

    def test_env_to_stdout(self, run, with_arm, capsys):
        assert run("env", "-", "--profile", "arm") == 0

        out = capsys.readouterr().out
        assert out.startswith("#!/bin/sh\n")
        assert "sysroot_reset()" in out

    def test_env_default_file(self, run, with_arm, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        run("select", "arm")

        assert run("env") == 0

        script = (tmp_path / "sysroot_manager.env").read_text()
        assert "# Environment script for sysroot: arm" in script

    def test_env_nothing_active(self, run, with_arm, capsys):
        assert run("env", "-") == 1

        assert "No sysroot active" in capsys.readouterr().err


class TestFatalErrors:
    """Tests for exit code 2 failures."""

    def test_corrupt_registry(self, run, isolated_home, capsys):
        (isolated_home / "sysroots.json").write_text("{broken")

        assert run("list") == 2
        assert "Failed to load registry" in capsys.readouterr().err

    def test_missing_config_file(self, run, tmp_path, capsys):
        assert run("--config", str(tmp_path / "nope.yaml"), "list") == 2

        assert "Configuration file not found" in capsys.readouterr().err

    def test_config_relocates_registry(self, run, isolated_home, cross_sysroot, tmp_path):
        config = tmp_path / "alt.yaml"
        config.write_text(f"registry_file: {tmp_path / 'alt.json'}\n")

        assert run("--config", str(config), "add", str(cross_sysroot), "arm") == 0

        assert (tmp_path / "alt.json").exists()
        assert not (isolated_home / "sysroots.json").exists()


class TestEvalOutput:
    """Tests that --eval stdout holds nothing but shell code."""

    def test_list_goes_to_stderr(self, run, cross_sysroot, capsys):
        name = "x$(touch injected)"
        run("add", str(cross_sysroot), name)
        capsys.readouterr()

        assert run("--eval", "list") == 0

        captured = capsys.readouterr()
        assert captured.out == ""
        assert f"[{name}]" in captured.err

    def test_current(self, run, with_arm, capsys):
        run("select", "arm")
        capsys.readouterr()

        assert run("--eval", "current") == 0

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Name: arm" in captured.err

    @pytest.mark.parametrize("args", [["help"], []])
    def test_help(self, run, capsys, args):
        run("--eval", *args)

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "usage:" in captured.err.lower()

    def test_env_script_not_evaluated(self, run, with_arm, capsys):
        assert run("--eval", "env", "-", "--profile", "arm") == 0

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.startswith("#!/bin/sh\n")

    def test_select_only_exports(self, run, with_arm, capsys):
        run("--eval", "select", "arm")

        lines = capsys.readouterr().out.splitlines()
        assert lines
        assert all(line.startswith(("export ", "unset ")) for line in lines)


class TestUnreadableState:
    """Tests for state files that are not valid UTF-8."""

    def test_registry(self, run, isolated_home, capsys):
        (isolated_home / "sysroots.json").write_bytes(b'{"sysroots": [{"name": "\xff"}]}')

        assert run("list") == 2
        assert "Failed to load registry" in capsys.readouterr().err

    def test_active_marker(self, run, isolated_home, capsys):
        (isolated_home / "current_sysroot").write_bytes(b"\xff\xfe\n")

        assert run("current") == 2
        assert "Cannot read" in capsys.readouterr().err
