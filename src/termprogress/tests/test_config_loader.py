"""
Test suite for configuration loading system.

This module tests the configuration loading, environment variable overrides,
YAML file parsing, and configuration discovery functionality.
"""

import os

import pytest

from termprogress.config.loader import (
    ConfigLoader, validate_config_file, ConfigurationError
)
from termprogress.config.models import LogLevel, TermProgressConfig


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run in an empty directory with no TERMPROGRESS_* variables set."""
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("TERMPROGRESS_"):
            monkeypatch.delenv(key)
    return tmp_path


@pytest.fixture
def loader(workdir):
    return ConfigLoader(load_env_file=False)


@pytest.mark.unit
class TestConfigLoader:
    """Test the ConfigLoader class functionality."""

    def test_load_default_config(self, loader):
        """Test loading built-in defaults when no files exist."""
        config = loader.load_config()

        assert isinstance(config, TermProgressConfig)
        assert config.progress.bar_length == 40
        assert config.app.log_level == LogLevel.WARNING

    def test_load_config_from_yaml_file(self, loader, workdir):
        """Test loading configuration from an explicit YAML file."""
        config_file = workdir / "custom.yaml"
        config_file.write_text(
            "app:\n"
            "  log_level: DEBUG\n"
            "progress:\n"
            "  bar_length: 30\n"
            "  filled_char: \"#\"\n"
            "  show_eta: false\n",
            encoding="utf-8",
        )

        config = loader.load_config(str(config_file))

        assert config.app.log_level == LogLevel.DEBUG
        assert config.progress.bar_length == 30
        assert config.progress.filled_char == "#"
        assert config.progress.show_eta is False

    def test_missing_explicit_file(self, loader):
        """Test that a missing explicit file is an error."""
        with pytest.raises(ConfigurationError) as exc_info:
            loader.load_config("does-not-exist.yaml")

        assert "not found" in str(exc_info.value)

    def test_invalid_yaml(self, loader, workdir):
        """Test that malformed YAML is reported."""
        config_file = workdir / "broken.yaml"
        config_file.write_text("progress: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigurationError) as exc_info:
            loader.load_config(config_file)

        assert "Invalid YAML" in str(exc_info.value)

    def test_non_mapping_yaml(self, loader, workdir):
        """Test that the top level must be a mapping."""
        config_file = workdir / "list.yaml"
        config_file.write_text("- one\n- two\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            loader.load_config(config_file)

    def test_empty_yaml(self, loader, workdir):
        """Test that an empty file yields defaults."""
        config_file = workdir / "empty.yaml"
        config_file.write_text("", encoding="utf-8")

        assert loader.load_config(config_file).progress.bar_length == 40

    def test_validation_errors_are_formatted(self, loader, workdir):
        """Test that validation failures name the offending field."""
        config_file = workdir / "invalid.yaml"
        config_file.write_text("progress:\n  bar_length: 0\n", encoding="utf-8")

        with pytest.raises(ConfigurationError) as exc_info:
            loader.load_config(config_file)

        message = str(exc_info.value)
        assert "Validation errors" in message
        assert "progress -> bar_length" in message
        assert exc_info.value.details["error_type"] == "validation"

    def test_default_file_discovery(self, loader, workdir):
        """Test that termprogress.yaml in the working directory is picked up."""
        (workdir / "termprogress.yaml").write_text("progress:\n  precision: 3\n", encoding="utf-8")

        assert loader.load_config().progress.precision == 3

    def test_configs_directory_discovery(self, loader, workdir):
        """Test that configs/termprogress.yaml is picked up."""
        (workdir / "configs").mkdir()
        (workdir / "configs" / "termprogress.yaml").write_text("progress:\n  spinner: line\n", encoding="utf-8")

        assert loader.load_config().progress.spinner == "line"

    def test_environment_specific_file(self, loader, workdir, monkeypatch):
        """Test that TERMPROGRESS_ENV selects an overlay file."""
        (workdir / "termprogress.yaml").write_text(
            "progress:\n  bar_length: 20\n  precision: 2\n", encoding="utf-8"
        )
        (workdir / "configs").mkdir()
        (workdir / "configs" / "ci.yaml").write_text("progress:\n  bar_length: 60\n", encoding="utf-8")
        monkeypatch.setenv("TERMPROGRESS_ENV", "ci")

        config = loader.load_config()

        assert config.progress.bar_length == 60
        assert config.progress.precision == 2

    def test_explicit_file_overrides_default(self, loader, workdir):
        """Test that an explicit file wins over the default file."""
        (workdir / "termprogress.yaml").write_text("progress:\n  bar_length: 20\n", encoding="utf-8")
        explicit = workdir / "explicit.yaml"
        explicit.write_text("progress:\n  bar_length: 35\n", encoding="utf-8")

        assert loader.load_config(explicit).progress.bar_length == 35


@pytest.mark.unit
class TestEnvironmentOverrides:
    """Test TERMPROGRESS_* environment variables."""

    def test_environment_variable_overrides(self, loader, workdir, monkeypatch):
        """Test that environment variables override config file values."""
        config_file = workdir / "config.yaml"
        config_file.write_text("progress:\n  bar_length: 20\n", encoding="utf-8")
        monkeypatch.setenv("TERMPROGRESS_PROGRESS_BAR_LENGTH", "30")

        assert loader.load_config(config_file).progress.bar_length == 30

    def test_value_conversion(self, loader, monkeypatch):
        """Test bool, int, float and string conversion."""
        monkeypatch.setenv("TERMPROGRESS_PROGRESS_USE_COLORS", "false")
        monkeypatch.setenv("TERMPROGRESS_PROGRESS_SHOW_SPEED", "no")
        monkeypatch.setenv("TERMPROGRESS_PROGRESS_PRECISION", "0")
        monkeypatch.setenv("TERMPROGRESS_PROGRESS_TICK_INTERVAL", "0.5")
        monkeypatch.setenv("TERMPROGRESS_PROGRESS_SPINNER", "arrow")
        monkeypatch.setenv("TERMPROGRESS_APP_LOG_LEVEL", "ERROR")

        config = loader.load_config()

        assert config.progress.use_colors is False
        assert config.progress.show_speed is False
        assert config.progress.precision == 0
        assert config.progress.tick_interval == 0.5
        assert config.progress.spinner == "arrow"
        assert config.app.log_level == LogLevel.ERROR

    def test_unknown_sections_are_ignored(self, loader, monkeypatch):
        """Test that variables outside the known sections are skipped."""
        monkeypatch.setenv("TERMPROGRESS_UNKNOWN_FIELD", "1")

        config = loader.load_config()

        assert not hasattr(config, "unknown")

    def test_invalid_environment_value(self, loader, monkeypatch):
        """Test that a bad override fails validation."""
        monkeypatch.setenv("TERMPROGRESS_PROGRESS_BAR_LENGTH", "huge")

        with pytest.raises(ConfigurationError):
            loader.load_config()


@pytest.mark.unit
class TestConfigCaching:
    """Test get_config and reload_config."""

    def test_get_config_caches(self, loader):
        """Test that get_config returns the loaded instance."""
        first = loader.get_config()

        assert loader.get_config() is first

    def test_reload_config(self, loader, workdir):
        """Test that reload picks up changed files."""
        loader.get_config()
        (workdir / "termprogress.yaml").write_text("progress:\n  bar_length: 12\n", encoding="utf-8")

        assert loader.reload_config().progress.bar_length == 12


@pytest.mark.unit
class TestValidateConfigFile:
    """Test validate_config_file."""

    def test_valid_file(self, workdir):
        """Test a valid file."""
        config_file = workdir / "ok.yaml"
        config_file.write_text("progress:\n  bar_length: 25\n", encoding="utf-8")

        assert validate_config_file(config_file) == (True, None)

    def test_invalid_file(self, workdir):
        """Test an invalid file."""
        config_file = workdir / "bad.yaml"
        config_file.write_text("progress:\n  filled_char: '##'\n", encoding="utf-8")

        is_valid, message = validate_config_file(config_file)

        assert is_valid is False
        assert "filled_char" in message
