"""
Pydantic models for termprogress configuration validation.

The ``progress`` section carries the rendering options that every console
renderer understands; the ``app`` section carries logging settings for
programs (such as the demo CLI) that let termprogress configure logging.
"""

from typing import Optional
from pathlib import Path
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class LogLevel(str, Enum):
    """Supported log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# Throttle applied by test mode when no explicit throttle is configured.
TEST_MODE_THROTTLE_MS = 100


class AppConfig(BaseModel):
    """Application-level logging settings."""

    log_level: LogLevel = Field(default=LogLevel.WARNING, description="Logging level")
    verbose_logging: bool = Field(default=False, description="Enable verbose debug logging")

    log_file: Optional[str] = Field(default=None, description="Optional JSON log file location")
    max_log_size_mb: int = Field(default=10, ge=1, le=1000, description="Maximum log file size")
    backup_count: int = Field(default=5, ge=1, le=100, description="Number of backup log files")
    log_format: str = Field(
        default="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        description="Console log format string"
    )

    @field_validator('log_file')
    @classmethod
    def expand_path(cls, v):
        """Expand user home directory in paths."""
        if v is None:
            return v
        return str(Path(v).expanduser())


class ProgressConfig(BaseModel):
    """Rendering options for console progress bars and spinners."""

    bar_length: int = Field(default=40, ge=1, le=500, description="Visual width of the bar in cells")
    filled_char: str = Field(default="█", description="Glyph for completed cells")
    empty_char: str = Field(default="░", description="Glyph for remaining cells")
    use_colors: bool = Field(default=True, description="Decorate output with colors")

    show_eta: bool = Field(default=True, description="Show estimated time remaining")
    show_speed: bool = Field(default=True, description="Show smoothed throughput")
    show_percentage: bool = Field(default=True, description="Show percentage complete")
    precision: int = Field(default=1, ge=0, le=10, description="Decimal places for displayed percentage")

    template: Optional[str] = Field(
        default=None,
        description="Output format with {field} placeholders; replaces the bar layout"
    )
    update_throttle: float = Field(default=0, ge=0, description="Minimum milliseconds between renders")
    test_mode: bool = Field(default=False, description="Slow renders down for visual inspection")

    spinner: str = Field(default="dots", description="Spinner preset for indeterminate progress")
    tick_interval: float = Field(default=0.1, gt=0, le=10.0, description="Seconds between spinner frames")

    @field_validator('filled_char', 'empty_char')
    @classmethod
    def validate_glyph(cls, v):
        """Bar glyphs must occupy exactly one character."""
        if len(v) != 1:
            raise ValueError("bar glyphs must be a single character")
        return v

    @model_validator(mode='after')
    def apply_test_mode(self):
        """Test mode implies a visible throttle unless one was set explicitly."""
        if self.test_mode and self.update_throttle == 0:
            self.update_throttle = TEST_MODE_THROTTLE_MS
        return self


class TermProgressConfig(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(extra="allow", validate_assignment=True)

    app: AppConfig = Field(default_factory=AppConfig)
    progress: ProgressConfig = Field(default_factory=ProgressConfig)
