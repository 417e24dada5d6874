"""
Renderer contract.

A renderer turns ``ProgressSnapshot`` values into output. Sessions only rely
on three methods: ``render(snapshot)``, ``cleanup()`` and, when present,
``reset()``. Subclassing ``ProgressRenderer`` is the usual way to get the
no-op defaults, but any object with a ``render`` method is accepted.
"""

from typing import Protocol, runtime_checkable

from ..core.types import ProgressSnapshot
from ..utils.error_handling import RendererContractError


@runtime_checkable
class SupportsRender(Protocol):
    def render(self, snapshot: ProgressSnapshot) -> None: ...

    def cleanup(self) -> None: ...


class ProgressRenderer:
    """Base class for renderers."""

    def render(self, snapshot: ProgressSnapshot) -> None:
        raise RendererContractError(
            f"{type(self).__name__}.render() must be implemented by subclass"
        )

    def cleanup(self) -> None:
        """Release output resources (cursor, open line). Default: nothing."""

    def reset(self) -> None:
        """Forget per-run state so the renderer can be reused. Default: nothing."""
