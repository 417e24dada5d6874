"""
Shared pytest configuration for termprogress tests.

This file provides a controllable clock, in-memory terminals and a private
shutdown registry so tests never touch the real TTY or process signal
handlers.
"""

import io

import pytest
from rich.console import Console

from termprogress.config.models import ProgressConfig
from termprogress.core.shutdown import ShutdownRegistry
from termprogress.ui.terminal import Terminal


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_terminal(interactive: bool = True, width: int = 120) -> Terminal:
    """Terminal writing to StringIO buffers, without colors."""
    console = Console(file=io.StringIO(), force_terminal=interactive, width=width,
                      color_system=None, highlight=False)
    error_console = Console(file=io.StringIO(), force_terminal=False, width=width,
                            color_system=None, highlight=False)
    return Terminal(console, error_console)


def read_output(terminal: Terminal) -> str:
    return terminal.console.file.getvalue()


def read_errors(terminal: Terminal) -> str:
    return terminal.error_console.file.getvalue()


@pytest.fixture
def clock():
    """Provide a fake clock starting at t=1000s."""
    return FakeClock()


@pytest.fixture
def terminal(monkeypatch):
    """Provide an interactive in-memory terminal."""
    monkeypatch.delenv("CI", raising=False)
    # rich drops control codes on dumb terminals
    monkeypatch.setenv("TERM", "xterm-256color")
    return make_terminal(interactive=True)


@pytest.fixture
def plain_terminal():
    """Provide a non-interactive in-memory terminal (pipe or CI log)."""
    return make_terminal(interactive=False)


@pytest.fixture
def registry():
    """Provide a shutdown registry that is never installed into the process."""
    return ShutdownRegistry()


@pytest.fixture
def plain_config():
    """Provide a progress config without colors, speed or ETA for stable output."""
    return ProgressConfig(use_colors=False, show_speed=False, show_eta=False)


@pytest.fixture
def session_kwargs(terminal, registry, clock):
    """Keyword arguments wiring a session to the fake terminal, registry and clock."""
    return {"terminal": terminal, "shutdown_registry": registry, "clock": clock}


# Test markers for categorizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
