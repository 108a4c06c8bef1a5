"""
Unit tests for the environment context.
"""

from sysrootkit.core.environment import (
    EnvironmentContext,
    render_export,
    render_exports,
    render_shell_commands,
)


class TestEnvironmentContext:
    """Tests for EnvironmentContext get/set/unset."""

    def test_initial_values(self):
        context = EnvironmentContext({"PATH": "/usr/bin"})

        assert context.get("PATH") == "/usr/bin"
        assert context.get("CC") is None
        assert context.get("CC", "gcc") == "gcc"

    def test_set_and_unset(self):
        context = EnvironmentContext()
        context.set("CC", "/opt/bin/gcc")
        assert "CC" in context

        context.unset("CC", "NOT_SET")
        assert "CC" not in context

    def test_initial_snapshot_is_copied(self):
        environ = {"PATH": "/usr/bin"}
        context = EnvironmentContext.from_environ(environ)
        context.set("PATH", "/opt/bin:/usr/bin")

        assert environ["PATH"] == "/usr/bin"
        assert context.initial["PATH"] == "/usr/bin"

    def test_changes_reports_set_and_unset(self):
        context = EnvironmentContext({"PATH": "/usr/bin", "CFLAGS": "-O2"})
        context.set("PATH", "/opt/bin:/usr/bin")
        context.set("CC", "/opt/bin/gcc")
        context.unset("CFLAGS")

        assert context.changes() == {
            "PATH": "/opt/bin:/usr/bin",
            "CC": "/opt/bin/gcc",
            "CFLAGS": None,
        }

    def test_setting_same_value_is_not_a_change(self):
        context = EnvironmentContext({"PATH": "/usr/bin"})
        context.set("PATH", "/usr/bin")

        assert context.changes() == {}

    def test_apply_to(self):
        environ = {"PATH": "/usr/bin", "CFLAGS": "-O2"}
        context = EnvironmentContext(environ)
        context.set("CC", "gcc")
        context.unset("CFLAGS")

        applied = context.apply_to(environ)

        assert environ == {"PATH": "/usr/bin", "CC": "gcc"}
        assert applied == {"CC": "gcc", "CFLAGS": None}


class TestShellRendering:
    """Tests for export/unset rendering."""

    def test_render_export_quotes_value(self):
        assert render_export("CFLAGS", "-std=c99 -m32") == "export CFLAGS='-std=c99 -m32'"
        assert render_export("CC", "/usr/bin/gcc") == "export CC=/usr/bin/gcc"

    def test_render_exports_skips_empty(self):
        lines = render_exports(
            {"CFLAGS": "-std=c11", "ASFLAGS": ""}, ("CFLAGS", "CXXFLAGS", "ASFLAGS")
        )

        assert lines == ["export CFLAGS=-std=c11"]

    def test_render_shell_commands(self):
        text = render_shell_commands({"CC": "gcc", "CFLAGS": None})

        assert text.splitlines() == ["export CC=gcc", "unset CFLAGS"]
