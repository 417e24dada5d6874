"""
Multi-session manager: independent progress sessions addressed by id.
"""

from typing import Any, Dict, List, Optional

from .session import ProgressSession, ProgressSessionBuilder
from .types import ProgressSnapshot
from ..config.models import ProgressConfig
from ..renderers.base import ProgressRenderer
from ..renderers.console import ConsoleProgressRenderer
from ..renderers.multi import MultiProgressRenderer
from ..utils.logging import get_logger


class MultiProgressManager:
    """Keeps a mapping of session id to ``ProgressSession``.

    Lookups for unknown ids return ``None`` rather than raising. Adding an id
    that is already present stops the previous session before replacing it.

    When a ``MultiProgressRenderer`` is supplied, every default-rendered
    session draws through its own slot in that fan-out renderer.
    """

    def __init__(self, config: Optional[ProgressConfig] = None,
                 fan_out: Optional[MultiProgressRenderer] = None,
                 **session_kwargs: Any):
        self.config = config
        self.fan_out = fan_out
        self._session_kwargs = session_kwargs
        self._sessions: Dict[str, ProgressSession] = {}
        self.logger = get_logger(__name__)

    def add(self, progress_id: str, total: float, description: str = "Progress",
            config: Optional[ProgressConfig] = None,
            renderer: Optional[ProgressRenderer] = None) -> ProgressSession:
        previous = self._sessions.get(progress_id)
        if previous is not None:
            self.logger.debug(f"Replacing progress session {progress_id!r}")
            previous.stop()

        config = config if config is not None else self.config
        if renderer is None and self.fan_out is not None:
            terminal = self._session_kwargs.get("terminal")
            self.fan_out.add_progress(progress_id, ConsoleProgressRenderer(config, terminal=terminal))
            renderer = self.fan_out.bind(progress_id)

        if renderer is None:
            builder = ProgressSessionBuilder(config)
            session = (builder.with_total(total)
                       .with_description(description)
                       .with_session_options(**self._session_kwargs)
                       .build())
        else:
            session = ProgressSession(total, description, renderer,
                                      config=config, **self._session_kwargs)

        self._sessions[progress_id] = session
        return session

    def get(self, progress_id: str) -> Optional[ProgressSession]:
        return self._sessions.get(progress_id)

    def update(self, progress_id: str, increment: float = 1) -> Optional[ProgressSnapshot]:
        session = self._sessions.get(progress_id)
        return session.update(increment) if session else None

    def complete(self, progress_id: str) -> Optional[ProgressSnapshot]:
        session = self._sessions.get(progress_id)
        return session.complete() if session else None

    def remove(self, progress_id: str) -> bool:
        session = self._sessions.pop(progress_id, None)
        if session is None:
            return False

        session.stop()
        if self.fan_out is not None:
            self.fan_out.remove_progress(progress_id)
        return True

    def clear(self) -> None:
        for session in self._sessions.values():
            session.stop()
        if self.fan_out is not None:
            for progress_id in self._sessions:
                self.fan_out.remove_progress(progress_id)
        self._sessions.clear()

    def ids(self) -> List[str]:
        return list(self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, progress_id: object) -> bool:
        return progress_id in self._sessions
