"""
Test suite for the multi-session manager.
"""

import pytest

from termprogress.core.manager import MultiProgressManager
from termprogress.core.types import SessionState
from termprogress.renderers import (
    BoundRenderer, ConsoleProgressRenderer, MultiProgressRenderer, SilentProgressRenderer
)


@pytest.fixture
def manager(session_kwargs, plain_config):
    """Provide a manager wired to the fake terminal and registry."""
    return MultiProgressManager(plain_config, **session_kwargs)


@pytest.mark.unit
class TestMultiProgressManager:
    """Test id-addressed sessions."""

    def test_add_and_update(self, manager):
        """Test independent progress per id."""
        manager.add("download", 10, "Downloading")
        manager.add("extract", 4, "Extracting")

        manager.update("download", 5)
        snapshot = manager.update("extract")

        assert snapshot.percentage == 25.0
        assert manager.get("download").get_progress().percentage == 50.0
        assert manager.ids() == ["download", "extract"]
        assert len(manager) == 2
        assert "download" in manager

    def test_default_renderer_is_console(self, manager):
        """Test that sessions added without a renderer draw on the console."""
        session = manager.add("job", 3)

        assert isinstance(session.renderer, ConsoleProgressRenderer)

    def test_explicit_renderer(self, manager):
        """Test that a per-add renderer is used as given."""
        renderer = SilentProgressRenderer()
        session = manager.add("job", 3, renderer=renderer)
        manager.update("job")

        assert session.renderer is renderer
        assert len(renderer.get_history()) == 1

    def test_unknown_ids(self, manager):
        """Test that unknown ids are absorbed."""
        assert manager.get("missing") is None
        assert manager.update("missing") is None
        assert manager.complete("missing") is None
        assert manager.remove("missing") is False

    def test_complete(self, manager):
        """Test completing one session by id."""
        manager.add("job", 3, renderer=SilentProgressRenderer())
        snapshot = manager.complete("job")

        assert snapshot.is_complete
        assert manager.get("job").is_completed()

    def test_duplicate_id_stops_previous_session(self, manager):
        """Test that re-adding an id replaces and stops the old session."""
        first = manager.add("job", 5, renderer=SilentProgressRenderer())
        first.start()
        second = manager.add("job", 8, renderer=SilentProgressRenderer())

        assert first.get_state() == SessionState.STOPPED
        assert manager.get("job") is second
        assert len(manager) == 1

    def test_remove_stops_session(self, manager, registry):
        """Test that removing an id stops its session."""
        session = manager.add("job", 5, renderer=SilentProgressRenderer())
        session.start()

        assert manager.remove("job") is True
        assert session.get_state() == SessionState.STOPPED
        assert "job" not in manager
        assert len(registry) == 0

    def test_clear(self, manager):
        """Test stopping and dropping every session."""
        sessions = [manager.add(name, 5, renderer=SilentProgressRenderer()).start()
                    for name in ("a", "b")]
        manager.clear()

        assert len(manager) == 0
        assert all(s.get_state() == SessionState.STOPPED for s in sessions)


@pytest.mark.unit
class TestManagerWithFanOut:
    """Test sessions drawing through a shared fan-out renderer."""

    def test_sessions_get_fan_out_slots(self, session_kwargs, plain_config):
        """Test that each default-rendered session owns one slot."""
        fan_out = MultiProgressRenderer()
        manager = MultiProgressManager(plain_config, fan_out=fan_out, **session_kwargs)

        session = manager.add("a", 2)
        manager.add("b", 2)

        assert isinstance(session.renderer, BoundRenderer)
        assert fan_out.line_count == 2
        assert isinstance(fan_out.get("a"), ConsoleProgressRenderer)

        manager.update("a")
        assert fan_out.get("a").last_output.endswith("(1/2)")
        assert fan_out.get("b").last_output is None

    def test_remove_frees_slot(self, session_kwargs, plain_config):
        """Test that removal drops the fan-out slot."""
        fan_out = MultiProgressRenderer()
        manager = MultiProgressManager(plain_config, fan_out=fan_out, **session_kwargs)
        manager.add("a", 2)
        manager.remove("a")

        assert fan_out.line_count == 0
