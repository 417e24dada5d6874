"""
termprogress utilities

This module provides the logging and error handling helpers used throughout
termprogress.
"""

from .logging import (
    setup_logging,
    get_logger,
    log_performance,
    is_logging_initialized,
    log_config_info,
)

from .error_handling import (
    TermProgressError,
    RendererContractError,
    ConfigurationError,
    ObserverError,
    safe_call,
    describe_callable,
)

__all__ = [
    # Logging utilities
    "setup_logging",
    "get_logger",
    "log_performance",
    "is_logging_initialized",
    "log_config_info",

    # Error handling utilities
    "TermProgressError",
    "RendererContractError",
    "ConfigurationError",
    "ObserverError",
    "safe_call",
    "describe_callable",
]
