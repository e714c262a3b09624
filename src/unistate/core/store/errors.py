"""Error taxonomy raised (or reported) by :class:`unistate.core.store.Store`.

Only :class:`SubscriberFailure` is recovered inside the store: it is handed to
the store's error reporter and never reaches the dispatch caller. Every other
error is raised synchronously from ``dispatch_action`` with the store unchanged.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any


class StoreError(Exception):
    """Base class for every error the store produces."""


class HandlerNotFound(StoreError):
    """The dispatched action name has no entry in the handler table."""

    def __init__(self, action_name: str) -> None:
        super().__init__(f"Action handler not found: '{action_name}'")
        self.action_name = action_name


class HandlerExecutionFailure(StoreError):
    """The handler raised while computing the next state.

    The original exception is available as ``__cause__``.
    """

    def __init__(self, action_name: str, error: BaseException) -> None:
        super().__init__(f"Handler for '{action_name}' failed: {error!r}")
        self.action_name = action_name
        self.error = error


class SubscriberFailure(StoreError):
    """A subscriber raised while being notified of a committed state."""

    def __init__(
        self,
        subscriber: Callable[[Any], None],
        error: Exception,
        revision: int,
    ) -> None:
        name = getattr(subscriber, "__qualname__", repr(subscriber))
        super().__init__(f"Subscriber {name} failed at revision {revision}: {error!r}")
        self.subscriber = subscriber
        self.error = error
        self.revision = revision


class ReentrantDispatch(StoreError):
    """``dispatch_action`` was called while the same store was already dispatching."""

    def __init__(self, action_name: str) -> None:
        super().__init__(
            f"Re-entrant dispatch of '{action_name}' rejected; "
            "a dispatch is already running on this store"
        )
        self.action_name = action_name


__all__ = [
    "HandlerExecutionFailure",
    "HandlerNotFound",
    "ReentrantDispatch",
    "StoreError",
    "SubscriberFailure",
]
