"""
Logging system for termprogress.

This module wires the standard library logging package to the configuration
system. Library code only ever asks for a logger via ``get_logger(__name__)``;
handlers are installed once by ``setup_logging`` from an application entry
point (the demo CLI, or a host program that embeds termprogress).

Console log output goes to stderr so it never collides with the progress line
that renderers own on stdout.
"""

import os
import sys
import json
import time
import logging
import logging.handlers
from pathlib import Path
from typing import Optional
from contextlib import contextmanager
from datetime import datetime


class ColoredConsoleFormatter(logging.Formatter):
    """Formatter that adds colors to console output based on log level."""

    RESET = '\033[0m'
    LEVEL_COLORS = {
        'DEBUG': '\033[90m',
        'INFO': '\033[94m',
        'WARNING': '\033[93m',
        'ERROR': '\033[91m',
        'CRITICAL': '\033[95m\033[1m',
    }

    def __init__(self, use_colors=True, stream=None, fmt=None):
        """Initialize the formatter.

        Args:
            use_colors: Whether to use colors in output
            stream: Stream the handler writes to, used for color detection
            fmt: Log format string
        """
        self.stream = stream or sys.stderr
        self.use_colors = use_colors and self._supports_color()

        fmt = fmt or '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
        super().__init__(fmt, datefmt='%Y-%m-%d %H:%M:%S')

    def _supports_color(self):
        """Check if the log stream supports color output."""
        if not hasattr(self.stream, 'isatty') or not self.stream.isatty():
            return False

        if os.getenv('NO_COLOR'):
            return False

        if os.getenv('FORCE_COLOR'):
            return True

        term = os.getenv('TERM', '').lower()
        return 'color' in term or term in ('xterm', 'xterm-256color', 'screen', 'linux')

    def format(self, record):
        """Format the log record with colors if enabled."""
        formatted = super().format(record)

        if not self.use_colors:
            return formatted

        color = self.LEVEL_COLORS.get(record.levelname, '')
        if color:
            formatted = f"{color}{formatted}{self.RESET}"

        return formatted


class JSONFileFormatter(logging.Formatter):
    """Formatter that outputs structured JSON logs for file storage."""

    _RESERVED = {
        'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
        'filename', 'module', 'exc_info', 'exc_text', 'stack_info',
        'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
        'thread', 'threadName', 'processName', 'process', 'getMessage',
        'message', 'taskName',
    }

    def format(self, record):
        """Format the log record as JSON."""
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'module': record.name,
            'message': record.getMessage(),
            'extra': {}
        }

        for field in ('filename', 'lineno', 'funcName', 'process', 'thread'):
            if hasattr(record, field):
                log_entry['extra'][field] = getattr(record, field)

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in self._RESERVED:
                log_entry['extra'][key] = value

        return json.dumps(log_entry, default=str)


class PerformanceTimer:
    """Context manager and decorator for performance timing."""

    def __init__(self, logger: logging.Logger, operation: str, level: int = logging.DEBUG):
        """Initialize the performance timer.

        Args:
            logger: Logger instance to use
            operation: Description of the operation being timed
            level: Log level to use for timing messages
        """
        self.logger = logger
        self.operation = operation
        self.level = level
        self.start_time = None
        self.end_time = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.log(self.level, f"Starting {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.perf_counter()
        duration = self.end_time - self.start_time

        if exc_type is None:
            self.logger.log(self.level, f"Completed {self.operation} in {duration:.3f}s")
        else:
            self.logger.log(self.level, f"Failed {self.operation} after {duration:.3f}s")

    @property
    def duration(self) -> Optional[float]:
        """Get the duration if timing is complete."""
        if self.start_time is not None and self.end_time is not None:
            return self.end_time - self.start_time
        return None


class LoggingManager:
    """Central logging manager for termprogress."""

    def __init__(self):
        self._initialized = False
        self._log_file: Optional[Path] = None

    def setup_logging(self, config, verbose: bool = False, force_reinit: bool = False):
        """Setup logging based on configuration.

        Args:
            config: TermProgressConfig instance
            verbose: Enable verbose logging (overrides config)
            force_reinit: Force reinitialization even if already setup
        """
        if self._initialized and not force_reinit:
            return

        if verbose or config.app.verbose_logging:
            log_level = logging.DEBUG
        else:
            log_level = getattr(logging, config.app.log_level.value.upper(), logging.INFO)

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)

        # Remove existing handlers to avoid duplicates
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        self._setup_console_handler(root_logger, config, log_level)

        if config.app.log_file:
            self._setup_file_handler(root_logger, config, log_level)

        self._setup_module_loggers(log_level)

        self._initialized = True

        logger = logging.getLogger('termprogress.logging')
        logger.debug("Logging system initialized")
        logger.debug(f"Log level: {logging.getLevelName(log_level)}")
        if self._log_file:
            logger.debug(f"Log file: {self._log_file}")

    def _setup_console_handler(self, root_logger: logging.Logger, config, log_level: int):
        """Setup console logging handler on stderr."""
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(
            ColoredConsoleFormatter(use_colors=config.progress.use_colors, stream=sys.stderr,
                                    fmt=config.app.log_format)
        )
        root_logger.addHandler(console_handler)

    def _setup_file_handler(self, root_logger: logging.Logger, config, log_level: int):
        """Setup file logging handler with rotation."""
        try:
            log_file = Path(config.app.log_file)
            log_file.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=config.app.max_log_size_mb * 1024 * 1024,
                backupCount=config.app.backup_count,
                encoding='utf-8'
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(JSONFileFormatter())

            root_logger.addHandler(file_handler)
            self._log_file = log_file

        except OSError as e:
            print(f"Warning: Could not setup file logging: {e}", file=sys.stderr)

    def _setup_module_loggers(self, log_level: int):
        """Keep the rendering modules quiet unless debugging."""
        module_levels = {
            "termprogress.core": logging.INFO,
            "termprogress.renderers": logging.WARNING,
            "termprogress.ui": logging.WARNING,
            "termprogress.config": logging.INFO,
        }

        for module_name, level in module_levels.items():
            if log_level == logging.DEBUG:
                level = logging.DEBUG
            logging.getLogger(module_name).setLevel(level)

    def create_performance_timer(self, operation: str, level: int = logging.DEBUG) -> PerformanceTimer:
        """Create a performance timer context manager."""
        logger = logging.getLogger('termprogress.performance')
        return PerformanceTimer(logger, operation, level)

    def is_initialized(self) -> bool:
        """Check if logging has been initialized."""
        return self._initialized


# Global logging manager instance
_logging_manager = LoggingManager()


def setup_logging(config, verbose: bool = False, force_reinit: bool = False):
    """Setup logging based on configuration.

    Args:
        config: TermProgressConfig instance
        verbose: Enable verbose logging
        force_reinit: Force reinitialization
    """
    _logging_manager.setup_logging(config, verbose, force_reinit)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given name."""
    return logging.getLogger(name)


@contextmanager
def log_performance(operation: str, level: int = logging.DEBUG):
    """Context manager for performance timing.

    Args:
        operation: Description of the operation being timed
        level: Log level to use for timing messages

    Yields:
        PerformanceTimer instance
    """
    timer = _logging_manager.create_performance_timer(operation, level)
    with timer:
        yield timer


def is_logging_initialized() -> bool:
    """Check if logging has been initialized."""
    return _logging_manager.is_initialized()


def log_config_info(config):
    """Log configuration information at startup."""
    logger = get_logger('termprogress.config')

    logger.debug(f"Log level: {config.app.log_level}")
    logger.debug(f"Bar length: {config.progress.bar_length}")
    logger.debug(f"Update throttle: {config.progress.update_throttle}ms")
    logger.debug(f"Template: {config.progress.template or '(none)'}")

    if config.app.verbose_logging:
        logger.debug("Verbose logging enabled")
