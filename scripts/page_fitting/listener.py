"""
Observer interface for watching a fit progress.

Callbacks are synchronous: the fitter does not touch any page while
a listener runs, and exceptions raised by a listener abort the fit.
"""

from typing import Protocol, Sequence

from .types import PageView


class ClusterListener(Protocol):
    """Receives page snapshots during fitting."""

    def updated(self, pages: Sequence[PageView]) -> None:
        """Called with the current pages after a refinement round."""
        ...

    def finished(self) -> None:
        """Called once, after the final sorted update."""
        ...


class NullListener:
    """Listener that ignores every callback."""

    def updated(self, pages: Sequence[PageView]) -> None:
        pass

    def finished(self) -> None:
        pass


class ListenerChain:
    """Forward callbacks to several listeners, in the order given."""

    def __init__(self, *listeners: ClusterListener):
        self._listeners = list(listeners)

    def updated(self, pages: Sequence[PageView]) -> None:
        for listener in self._listeners:
            listener.updated(pages)

    def finished(self) -> None:
        for listener in self._listeners:
            listener.finished()
