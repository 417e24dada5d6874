"""
Test suite for configuration models and validation.

This module tests the Pydantic configuration models, field validation and
the test-mode throttle rule.
"""

import pytest
from pydantic import ValidationError

from termprogress.config.models import (
    TermProgressConfig, AppConfig, ProgressConfig, LogLevel, TEST_MODE_THROTTLE_MS
)


@pytest.mark.unit
class TestAppConfig:
    """Test the AppConfig model."""

    def test_app_config_defaults(self):
        """Test AppConfig default values."""
        config = AppConfig()

        assert config.log_level == LogLevel.WARNING
        assert config.verbose_logging is False
        assert config.log_file is None
        assert config.max_log_size_mb == 10
        assert config.backup_count == 5

    def test_log_file_expansion(self):
        """Test that the log file path expands the home directory."""
        config = AppConfig(log_file="~/termprogress.log")

        assert not config.log_file.startswith("~")
        assert config.log_file.endswith("termprogress.log")

    def test_log_level_enum_validation(self):
        """Test LogLevel enum validation."""
        assert AppConfig(log_level="ERROR").log_level == LogLevel.ERROR

        with pytest.raises(ValidationError):
            AppConfig(log_level="INVALID_LEVEL")

    def test_size_bounds(self):
        """Test numeric bounds."""
        with pytest.raises(ValidationError):
            AppConfig(max_log_size_mb=0)

        with pytest.raises(ValidationError):
            AppConfig(backup_count=101)


@pytest.mark.unit
class TestProgressConfig:
    """Test the ProgressConfig model."""

    def test_progress_config_defaults(self):
        """Test rendering defaults."""
        config = ProgressConfig()

        assert config.bar_length == 40
        assert config.filled_char == "█"
        assert config.empty_char == "░"
        assert config.use_colors is True
        assert config.show_eta is True
        assert config.show_speed is True
        assert config.show_percentage is True
        assert config.precision == 1
        assert config.template is None
        assert config.update_throttle == 0
        assert config.test_mode is False
        assert config.spinner == "dots"
        assert config.tick_interval == 0.1

    def test_glyphs_must_be_single_characters(self):
        """Test glyph validation."""
        with pytest.raises(ValidationError) as exc_info:
            ProgressConfig(filled_char="##")

        assert "filled_char" in str(exc_info.value)

        with pytest.raises(ValidationError):
            ProgressConfig(empty_char="")

    def test_bar_length_bounds(self):
        """Test bar length validation."""
        assert ProgressConfig(bar_length=1).bar_length == 1

        with pytest.raises(ValidationError):
            ProgressConfig(bar_length=0)

        with pytest.raises(ValidationError):
            ProgressConfig(bar_length=501)

    def test_precision_bounds(self):
        """Test precision validation."""
        with pytest.raises(ValidationError):
            ProgressConfig(precision=-1)

        with pytest.raises(ValidationError):
            ProgressConfig(precision=11)

    def test_negative_throttle_rejected(self):
        """Test that the throttle cannot be negative."""
        with pytest.raises(ValidationError):
            ProgressConfig(update_throttle=-5)

    def test_tick_interval_must_be_positive(self):
        """Test tick interval validation."""
        with pytest.raises(ValidationError):
            ProgressConfig(tick_interval=0)

    def test_test_mode_sets_throttle(self):
        """Test that test mode implies the default throttle."""
        config = ProgressConfig(test_mode=True)

        assert config.update_throttle == TEST_MODE_THROTTLE_MS

    def test_test_mode_keeps_explicit_throttle(self):
        """Test that an explicit throttle wins over test mode."""
        config = ProgressConfig(test_mode=True, update_throttle=250)

        assert config.update_throttle == 250


@pytest.mark.unit
class TestTermProgressConfig:
    """Test the root configuration model."""

    def test_defaults(self):
        """Test that sections are created with defaults."""
        config = TermProgressConfig()

        assert isinstance(config.app, AppConfig)
        assert isinstance(config.progress, ProgressConfig)

    def test_nested_dicts(self):
        """Test construction from plain dictionaries."""
        config = TermProgressConfig(progress={"bar_length": 25}, app={"log_level": "DEBUG"})

        assert config.progress.bar_length == 25
        assert config.app.log_level == LogLevel.DEBUG

    def test_extra_sections_allowed(self):
        """Test that unknown top-level sections are kept."""
        config = TermProgressConfig(custom={"key": "value"})

        assert config.custom == {"key": "value"}

    def test_assignment_is_validated(self):
        """Test validate_assignment on the root model."""
        config = TermProgressConfig()

        with pytest.raises(ValidationError):
            config.progress = {"bar_length": -1}
