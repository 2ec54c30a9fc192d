"""
Tests for configuration loading — acquisition.yml parsing and validation.
"""

import textwrap
from pathlib import Path

import pytest

from dotnet_acquisition.core.config.loader import (
    TELEMETRY_ENV_VAR,
    AcquisitionSettings,
    ConfigError,
    find_settings_file,
    load_settings,
)


@pytest.fixture
def settings_yml(tmp_path: Path) -> Path:
    content = textwrap.dedent("""\
        script_dir: scripts
        install_root: /opt/dotnet-runtimes
        timeout_s: 45
        max_buffer_kib: 256
        online_probe_url: https://example.invalid/
        enable_telemetry: false
    """)
    path = tmp_path / "acquisition.yml"
    path.write_text(content)
    return path


class TestDefaults:
    def test_defaults(self):
        s = AcquisitionSettings()
        assert s.timeout_s == 30
        assert s.max_buffer_bytes == 500 * 1024
        assert s.enable_telemetry is True

    def test_no_file_means_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert find_settings_file() is None
        s = load_settings()
        assert s.timeout_s == 30


class TestLoadSettings:
    def test_values_loaded(self, settings_yml: Path):
        s = load_settings(settings_yml)
        assert s.timeout_s == 45
        assert s.max_buffer_bytes == 256 * 1024
        assert s.online_probe_url == "https://example.invalid/"
        assert s.install_root == Path("/opt/dotnet-runtimes")

    def test_relative_dirs_resolve_against_file(self, settings_yml: Path):
        s = load_settings(settings_yml)
        assert s.script_dir == settings_yml.parent.resolve() / "scripts"

    def test_nested_under_acquisition_key(self, tmp_path: Path):
        path = tmp_path / "acquisition.yml"
        path.write_text("acquisition:\n  timeout_s: 10\n")
        assert load_settings(path).timeout_s == 10

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "acquisition.yml"
        path.write_text("")
        assert load_settings(path).timeout_s == 30

    def test_found_walking_up(self, settings_yml: Path, monkeypatch):
        nested = settings_yml.parent / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        assert find_settings_file() == settings_yml.resolve()
        assert load_settings().timeout_s == 45


class TestErrors:
    def test_missing_explicit_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "acquisition.yml"
        path.write_text("timeout_s: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "acquisition.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(path)

    def test_invalid_value(self, tmp_path: Path):
        path = tmp_path / "acquisition.yml"
        path.write_text("timeout_s: -1\n")
        with pytest.raises(ConfigError, match="Invalid acquisition configuration"):
            load_settings(path)


class TestTelemetryFlag:
    def test_enabled_by_default(self, monkeypatch):
        monkeypatch.delenv(TELEMETRY_ENV_VAR, raising=False)
        assert AcquisitionSettings().telemetry_enabled()

    def test_file_flag_disables(self, monkeypatch):
        monkeypatch.delenv(TELEMETRY_ENV_VAR, raising=False)
        assert not AcquisitionSettings(enable_telemetry=False).telemetry_enabled()

    @pytest.mark.parametrize("value", ["0", "false", "OFF"])
    def test_env_flag_disables(self, monkeypatch, value):
        monkeypatch.setenv(TELEMETRY_ENV_VAR, value)
        assert not AcquisitionSettings().telemetry_enabled()

    def test_env_flag_cannot_override_file(self, monkeypatch):
        monkeypatch.setenv(TELEMETRY_ENV_VAR, "1")
        assert not AcquisitionSettings(enable_telemetry=False).telemetry_enabled()
