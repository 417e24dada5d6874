"""
Unified error handling utilities for termprogress.

Progress tracking is advisory: a broken observer, a failing cleanup task or a
renderer hiccup must never take down the work being tracked. This module holds
the exception hierarchy and the catch-log-continue primitive used wherever the
core calls out to user-supplied code.
"""

import logging
from typing import Any, Callable, Optional, Dict, Tuple

from .logging import get_logger


class TermProgressError(Exception):
    """Base exception for all termprogress errors."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class RendererContractError(TermProgressError, NotImplementedError):
    """A renderer or calculator was used without implementing its contract."""
    pass


class ConfigurationError(TermProgressError):
    """Configuration-related error."""
    pass


class ObserverError(TermProgressError):
    """An observer or cleanup callback raised during notification."""
    pass


def describe_callable(func: Any) -> str:
    """Return a short human-readable name for a callback or observer object."""
    name = getattr(func, "__name__", None)
    if name:
        return name
    return type(func).__name__


def safe_call(
    func: Callable,
    *args,
    logger: Optional[logging.Logger] = None,
    context: str = "callback",
    **kwargs
) -> Tuple[bool, Any]:
    """
    Invoke ``func`` and contain any exception it raises.

    The failure is logged (with traceback) as an ``ObserverError`` and the
    caller carries on with the next callback.

    Args:
        func: The callable to invoke
        *args: Positional arguments for ``func``
        logger: Logger to report failures on
        context: Short label for log messages ("progress observer", ...)

    Returns:
        Tuple of (succeeded, result); result is None on failure
    """
    _logger = logger or get_logger(__name__)

    try:
        return True, func(*args, **kwargs)
    except Exception as e:
        error = ObserverError(
            f"{context} {describe_callable(func)} failed: {e}",
            details={"error_type": type(e).__name__, "original_error": str(e)}
        )
        _logger.error(error.message, exc_info=True)
        return False, None
