"""
Test suite for the error hierarchy and the contained-callback helper.
"""

import logging
from functools import partial
from unittest.mock import Mock

import pytest

from termprogress.utils.error_handling import (
    TermProgressError, RendererContractError, ConfigurationError, ObserverError,
    safe_call, describe_callable
)


def double(value):
    return value * 2


class Listener:
    def __call__(self, value):
        return value

    def on_event(self, value):
        return value


@pytest.mark.unit
class TestErrorHierarchy:
    """Test the exception classes."""

    def test_details_default_to_empty(self):
        """Test that details are always a dict."""
        error = TermProgressError("boom")

        assert error.message == "boom"
        assert error.details == {}
        assert str(error) == "boom"

    def test_details_are_kept(self):
        """Test that details passed in are preserved."""
        error = ConfigurationError("bad", details={"config_path": "x.yaml"})

        assert error.details["config_path"] == "x.yaml"
        assert isinstance(error, TermProgressError)

    def test_renderer_contract_error(self):
        """Test that contract errors are also NotImplementedError."""
        error = RendererContractError("render not implemented")

        assert isinstance(error, NotImplementedError)
        assert isinstance(error, TermProgressError)

    def test_observer_error(self):
        assert issubclass(ObserverError, TermProgressError)


@pytest.mark.unit
class TestDescribeCallable:
    """Test callback naming in log messages."""

    def test_function(self):
        assert describe_callable(double) == "double"

    def test_bound_method(self):
        assert describe_callable(Listener().on_event) == "on_event"

    def test_callable_instance(self):
        assert describe_callable(Listener()) == "Listener"

    def test_partial(self):
        assert describe_callable(partial(double, 2)) == "partial"


@pytest.mark.unit
class TestSafeCall:
    """Test safe_call."""

    def test_success(self):
        """Test that the result is returned with a success flag."""
        assert safe_call(double, 21) == (True, 42)

    def test_kwargs_are_forwarded(self):
        """Test that keyword arguments reach the callable."""
        func = Mock(return_value="ok")

        succeeded, result = safe_call(func, 1, key="value")

        assert succeeded is True
        assert result == "ok"
        func.assert_called_once_with(1, key="value")

    def test_failure_is_contained_and_logged(self):
        """Test that an exception is logged and swallowed."""
        logger = Mock(spec=logging.Logger)

        def broken(_):
            raise ValueError("observer exploded")

        succeeded, result = safe_call(broken, 1, logger=logger, context="progress observer")

        assert succeeded is False
        assert result is None
        logger.error.assert_called_once()
        message = logger.error.call_args[0][0]
        assert "progress observer broken failed: observer exploded" == message
        assert logger.error.call_args[1]["exc_info"] is True

    def test_default_logger(self, caplog):
        """Test that failures go to the module logger by default."""
        def broken():
            raise RuntimeError("nope")

        with caplog.at_level(logging.ERROR, logger="termprogress.utils.error_handling"):
            assert safe_call(broken) == (False, None)

        assert "callback broken failed: nope" in caplog.text

    def test_keyboard_interrupt_propagates(self):
        """Test that interrupts are not contained."""
        def interrupted():
            raise KeyboardInterrupt()

        with pytest.raises(KeyboardInterrupt):
            safe_call(interrupted)
