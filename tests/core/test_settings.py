"""
Unit tests for settings loading.
"""

import logging

import pytest

from sysrootkit.core.exceptions import ConfigurationError
from sysrootkit.core.settings import (
    ManagerSettings,
    get_home_dir,
    load_settings,
    load_yaml_config,
)


class TestHomeDir:
    """Tests for home directory resolution."""

    def test_env_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SYSROOT_MANAGER_HOME", str(tmp_path / "custom"))

        assert get_home_dir() == tmp_path / "custom"

    def test_default(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SYSROOT_MANAGER_HOME", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))

        assert get_home_dir() == tmp_path / ".sysroot-manager"


class TestDefaults:
    """Tests for default settings."""

    def test_all_files_in_home(self, tmp_path):
        settings = ManagerSettings.defaults(tmp_path)

        assert settings.registry_file == tmp_path / "sysroots.json"
        assert settings.active_file == tmp_path / "current_sysroot"
        assert settings.path_backup_file == tmp_path / "path_backup"
        assert settings.flags_backup_file == tmp_path / "cflags_backup"
        assert settings.lock_dir == tmp_path / "lock"
        assert settings.c_compiler == "gcc"
        assert settings.cxx_compiler == "g++"

    def test_to_dict_stringifies_paths(self, tmp_path):
        data = ManagerSettings.defaults(tmp_path).to_dict()

        assert data["registry_file"] == str(tmp_path / "sysroots.json")
        assert data["probe_timeout"] == 5.0


class TestLoadSettings:
    """Tests for YAML configuration loading."""

    def test_no_config_file(self, isolated_home):
        settings = load_settings()

        assert settings.home_dir == isolated_home
        assert settings.registry_file == isolated_home / "sysroots.json"

    def test_config_in_home(self, isolated_home):
        (isolated_home / "config.yaml").write_text(
            "registry_file: profiles.json\n"
            "c_compiler: gcc-13\n"
            "probe_timeout: 10\n"
        )

        settings = load_settings()

        assert settings.registry_file == isolated_home / "profiles.json"
        assert settings.c_compiler == "gcc-13"
        assert settings.probe_timeout == 10.0

    def test_absolute_path_kept(self, isolated_home, tmp_path):
        config = tmp_path / "custom.yaml"
        config.write_text(f"active_file: {tmp_path / 'marker'}\n")

        settings = load_settings(config)

        assert settings.active_file == tmp_path / "marker"

    def test_explicit_config_must_exist(self, isolated_home, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_settings(tmp_path / "missing.yaml")

    def test_unknown_key_ignored(self, isolated_home, caplog):
        (isolated_home / "config.yaml").write_text("colour: always\n")

        with caplog.at_level(logging.WARNING):
            settings = load_settings()

        assert settings.c_compiler == "gcc"
        assert "unknown configuration key: colour" in caplog.text

    @pytest.mark.parametrize(
        "content",
        [
            "probe_timeout: fast\n",
            "probe_timeout: -1\n",
            "lock_timeout: true\n",
            "c_compiler: ''\n",
            "registry_file: 42\n",
        ],
    )
    def test_invalid_values(self, isolated_home, content):
        (isolated_home / "config.yaml").write_text(content)

        with pytest.raises(ConfigurationError):
            load_settings()

    def test_invalid_yaml(self, tmp_path):
        config = tmp_path / "broken.yaml"
        config.write_text("key: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_yaml_config(config)

    def test_non_mapping(self, tmp_path):
        config = tmp_path / "list.yaml"
        config.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_yaml_config(config)

    def test_empty_file(self, tmp_path):
        config = tmp_path / "empty.yaml"
        config.write_text("")

        assert load_yaml_config(config) == {}
