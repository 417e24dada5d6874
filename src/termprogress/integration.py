"""
Async integration helpers.

These wrap an awaitable unit of work in a progress session's full lifecycle:
start the session, run the task with an ``update`` callback, complete on
success, stop and report on failure. The task's own exception always reaches
the caller unchanged, and the session is never left running.

Usage:
    async def download(update):
        for chunk in chunks:
            await fetch(chunk)
            update()

    await with_progress(len(chunks), "Downloading", download)
"""

import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional, Tuple

from .config.models import ProgressConfig
from .core.session import ProgressSession, ProgressSessionBuilder
from .core.types import StateChange
from .ui.effects import ProgressEffects
from .utils.logging import get_logger

UpdateCallback = Callable[..., None]

logger = get_logger(__name__)


def _build_session(total: float, description: str,
                   config: Optional[ProgressConfig],
                   session: Optional[ProgressSession],
                   session_kwargs: Dict[str, Any]) -> ProgressSession:
    if session is not None:
        return session
    return (ProgressSessionBuilder(config)
            .with_total(total)
            .with_description(description)
            .with_session_options(**session_kwargs)
            .build())


def _effects_for(session: ProgressSession, effects: Optional[ProgressEffects]) -> ProgressEffects:
    if effects is not None:
        return effects
    return ProgressEffects(session.terminal, session.config.use_colors)


def _report_failure(session: ProgressSession, description: str,
                    error: BaseException, effects: Optional[ProgressEffects]) -> None:
    session.stop()
    logger.warning(f"{description} failed: {error}", exc_info=error)
    _effects_for(session, effects).show_failure_effect(description, error)


async def with_progress(total: float, description: str,
                        task: Callable[[UpdateCallback], Awaitable[Any]], *,
                        config: Optional[ProgressConfig] = None,
                        session: Optional[ProgressSession] = None,
                        effects: Optional[ProgressEffects] = None,
                        **session_kwargs: Any) -> Any:
    """Run ``task(update)`` under a determinate progress bar.

    Args:
        total: Units of work the task will report
        description: Label shown next to the bar
        task: Async callable receiving ``update(increment=1)``
        config: Rendering options for the default session
        session: Pre-built session to drive instead of a default one
        effects: Notice printer for the failure line
        **session_kwargs: terminal, shutdown_registry, calculator or clock

    Returns:
        Whatever ``task`` returns

    Raises:
        Exception: The task's own exception, after the session is stopped
    """
    progress = _build_session(total, description, config, session, session_kwargs)
    progress.start()

    def update(increment: float = 1) -> None:
        progress.update(increment)

    try:
        result = await task(update)
    except BaseException as e:
        _report_failure(progress, description, e, effects)
        raise

    if not progress.is_completed():
        progress.complete()
    return result


async def with_spinner(description: str, task: Callable[..., Awaitable[Any]], *,
                       config: Optional[ProgressConfig] = None,
                       session: Optional[ProgressSession] = None,
                       effects: Optional[ProgressEffects] = None,
                       **session_kwargs: Any) -> Any:
    """Run ``task()`` under an animated spinner; prints a success line when done."""
    if session is None:
        session = (ProgressSessionBuilder(config)
                   .with_description(description)
                   .for_spinner()
                   .with_session_options(**session_kwargs)
                   .build())
    session.start()

    try:
        result = await task()
    except BaseException as e:
        _report_failure(session, description, e, effects)
        raise

    session.complete()
    _effects_for(session, effects).show_success_effect(description)
    return result


async def with_progress_and_state(total: float, description: str,
                                  task: Callable[[UpdateCallback], Awaitable[Any]], *,
                                  config: Optional[ProgressConfig] = None,
                                  session: Optional[ProgressSession] = None,
                                  effects: Optional[ProgressEffects] = None,
                                  **session_kwargs: Any) -> Tuple[Any, List[Dict[str, Any]]]:
    """Like ``with_progress`` but also returns the session's state history.

    Each history entry holds ``timestamp``, ``new_state`` and ``old_state``.
    """
    session = _build_session(total, description, config, session, session_kwargs)
    state_history: List[Dict[str, Any]] = []

    def record(event: StateChange) -> None:
        state_history.append({
            "timestamp": time.time(),
            "new_state": event.new_state,
            "old_state": event.old_state,
        })

    detach = session.on_state_change(record)
    try:
        result = await with_progress(total, description, task,
                                     session=session, effects=effects)
    finally:
        detach()
    return result, state_history


@asynccontextmanager
async def progress_session(total: float, description: str = "Progress", *,
                           config: Optional[ProgressConfig] = None,
                           effects: Optional[ProgressEffects] = None,
                           **session_kwargs: Any) -> AsyncIterator[ProgressSession]:
    """Async context manager form of ``with_progress``.

    The body receives the started session and calls ``update`` on it.
    """
    session = _build_session(total, description, config, None, session_kwargs)
    session.start()

    try:
        yield session
    except BaseException as e:
        _report_failure(session, description, e, effects)
        raise

    if not session.is_completed():
        session.complete()
