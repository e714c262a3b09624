"""
In-memory Store: an append-only log of immutable snapshots driven by actions.

This module implements the state container at the center of the package. It
provides:

- ``dispatch_action(action)``: look up the handler, derive the next snapshot,
  commit it to history, then notify subscribers.
- ``subscribe(callback)``: register a callback invoked with every new state.
- ``current()`` / ``history()``: read the log.

Dispatch Pipeline
-----------------
1. **Guard**: a dispatch arriving while another one runs on the same store is
   rejected or queued according to the reentrancy policy.
2. **Lookup**: unknown action names raise ``HandlerNotFound``.
3. **Derive**: ``current().map(...)`` applies the handler. A failing handler
   raises ``HandlerExecutionFailure`` before anything is committed.
4. **Commit**: the new entry becomes index 0 of the history log.
5. **Notify**: subscribers run in registration order. A subscriber that raises
   is reported as ``SubscriberFailure`` and the remaining subscribers still run.
   The commit is never rolled back.

Design Goals
------------
- **Single source of truth**: the history log, not the subscribers.
- **Synchronous**: ``dispatch_action`` returns only after the full fan-out.
  The store is not thread-safe; concurrent writers must serialize dispatch.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Any, Generic, TypeVar

from ..result import Result, err, ok
from ..settings import get_logger, load_settings
from .diff import Change, diff
from .errors import (
    HandlerExecutionFailure,
    HandlerNotFound,
    ReentrantDispatch,
    StoreError,
    SubscriberFailure,
)
from .history import ActionDescriptor, History, HistoryEntry, RetentionPolicy
from .snapshot import Snapshot

S = TypeVar("S")

Handler = Callable[[Any, S], S]
Subscriber = Callable[[S], None]
ErrorReporter = Callable[[SubscriberFailure], None]

logger = get_logger("unistate.store")


class ReentrancyPolicy(StrEnum):
    """What happens when ``dispatch_action`` is called during a running dispatch."""

    REJECT = "reject"
    QUEUE = "queue"


def log_subscriber_failure(failure: SubscriberFailure) -> None:
    """Default error reporter: log the failure with its traceback."""
    logger.error("%s", failure, exc_info=failure.error)


class Subscription(Generic[S]):
    """Handle returned by :meth:`Store.subscribe`; call ``unsubscribe()`` to detach."""

    __slots__ = ("_store", "callback", "active")

    def __init__(self, store: Store[S], callback: Subscriber[S]) -> None:
        self._store = store
        self.callback = callback
        self.active = True

    def unsubscribe(self) -> bool:
        """Detach this registration. Returns False if it was already detached."""
        return self._store.unsubscribe(self)

    def __repr__(self) -> str:  # pragma: no cover - trivial representation
        name = getattr(self.callback, "__qualname__", repr(self.callback))
        return f"Subscription({name}, active={self.active})"


class Store(Generic[S]):
    """
    State container owning the history log, the handler table and the subscribers.

    Parameters
    ----------
    initial_state : S
        Value wrapped by the first history entry.
    handlers : Mapping[str, Handler]
        Action name -> ``(payload, state) -> new_state``. Copied into a
        read-only mapping; the functions themselves are only referenced.
    retention : RetentionPolicy | None
        History retention; defaults to ``settings.history_limit``.
    reentrancy : ReentrancyPolicy | str | None
        Reentrant dispatch handling; defaults to ``settings.reentrancy``.
    on_subscriber_error : ErrorReporter | None
        Receives every :class:`SubscriberFailure`; defaults to logging it.
    """

    __slots__ = (
        "_history",
        "_handlers",
        "_subscribers",
        "_reentrancy",
        "_report",
        "_dispatching",
        "_pending",
    )

    def __init__(
        self,
        initial_state: S,
        handlers: Mapping[str, Handler[S]],
        *,
        retention: RetentionPolicy | None = None,
        reentrancy: ReentrancyPolicy | str | None = None,
        on_subscriber_error: ErrorReporter | None = None,
    ) -> None:
        config = load_settings()
        if retention is None:
            retention = RetentionPolicy(max_entries=config.history_limit)
        self._history: History[S] = History(
            HistoryEntry(Snapshot(initial_state), None, 0), retention
        )
        self._handlers: Mapping[str, Handler[S]] = MappingProxyType(dict(handlers))
        self._subscribers: list[Subscription[S]] = []
        self._reentrancy = ReentrancyPolicy(reentrancy or config.reentrancy)
        self._report: ErrorReporter = on_subscriber_error or log_subscriber_failure
        self._dispatching = False
        self._pending: deque[ActionDescriptor] = deque()

    # ------------------------------- Read API -------------------------------

    def current(self) -> Snapshot[S]:
        """Return the snapshot of the most recent history entry."""
        return self._history.current.snapshot

    @property
    def state(self) -> S:
        """Shortcut for ``current().extract()``."""
        return self.current().extract()

    @property
    def revision(self) -> int:
        """Number of actions committed since construction."""
        return self._history.current.revision

    @property
    def handlers(self) -> Mapping[str, Handler[S]]:
        return self._handlers

    @property
    def retention(self) -> RetentionPolicy:
        return self._history.policy

    @property
    def reentrancy(self) -> ReentrancyPolicy:
        return self._reentrancy

    @property
    def dispatching(self) -> bool:
        """True while a dispatch (including its notification fan-out) is running."""
        return self._dispatching

    def history(self) -> tuple[HistoryEntry[S], ...]:
        """Return the retained history (immutable tuple, most-recent-first)."""
        return self._history.entries()

    def subscribers(self) -> tuple[Subscriber[S], ...]:
        """Return the registered callbacks in notification order."""
        return tuple(sub.callback for sub in self._subscribers)

    # ------------------------------- Dispatch -------------------------------

    def dispatch_action(self, action: ActionDescriptor) -> None:
        """
        Apply ``action`` to the current state, commit the result, notify subscribers.

        Raises
        ------
        HandlerNotFound
            ``action.name`` is not in the handler table. Nothing is committed.
        HandlerExecutionFailure
            The handler raised. Nothing is committed for that action.
        ReentrantDispatch
            Called during a running dispatch while the policy is ``reject``.
        """
        if self._dispatching:
            self._enqueue(action)
            return

        self._dispatching = True
        try:
            self._apply(action)
            while self._pending:
                self._apply(self._pending.popleft())
        finally:
            self._pending.clear()
            self._dispatching = False

    def dispatch(self, name: str, payload: Any = None) -> None:
        """Build an :class:`ActionDescriptor` and dispatch it."""
        self.dispatch_action(ActionDescriptor(name, payload))

    def try_dispatch(self, action: ActionDescriptor) -> Result[S, StoreError]:
        """Dispatch ``action`` and return ``Ok(new_state)`` or ``Err(error)`` instead of raising."""
        try:
            self.dispatch_action(action)
        except StoreError as exc:
            return err(exc)
        return ok(self.state)

    def _enqueue(self, action: ActionDescriptor) -> None:
        if self._reentrancy is ReentrancyPolicy.REJECT:
            raise ReentrantDispatch(action.name)
        if action.name not in self._handlers:
            raise HandlerNotFound(action.name)
        logger.debug("Action '%s' queued behind the running dispatch", action.name)
        self._pending.append(action)

    def _apply(self, action: ActionDescriptor) -> None:
        logger.debug("Action '%s' dispatched", action.name)
        handler = self._handlers.get(action.name)
        if handler is None:
            raise HandlerNotFound(action.name)

        def derive(inner: S) -> S:
            return handler(action.payload, inner)

        try:
            snapshot = self.current().map(derive)
        except Exception as exc:
            raise HandlerExecutionFailure(action.name, exc) from exc

        entry = HistoryEntry(snapshot, action, self.revision + 1)
        self._history.commit(entry)
        logger.debug("Committed revision %d (%s)", entry.revision, action.name)
        self._notify(entry)

    def _notify(self, entry: HistoryEntry[S]) -> None:
        value = entry.snapshot.extract()
        # Callbacks registered during the fan-out wait for the next dispatch.
        for sub in tuple(self._subscribers):
            if not sub.active:
                continue
            try:
                sub.callback(value)
            except Exception as exc:
                self._deliver(SubscriberFailure(sub.callback, exc, entry.revision))

    def _deliver(self, failure: SubscriberFailure) -> None:
        """Hand ``failure`` to the reporter; a failing reporter is logged, never raised."""
        try:
            self._report(failure)
        except Exception:
            logger.exception("Subscriber error reporter failed while reporting: %s", failure)

    # ----------------------------- Subscription -----------------------------

    def subscribe(self, callback: Subscriber[S]) -> Subscription[S]:
        """Register ``callback``; the same callable may be registered more than once."""
        sub = Subscription(self, callback)
        self._subscribers.append(sub)
        return sub

    def unsubscribe(self, subscription: Subscription[S]) -> bool:
        """Remove one registration. Returns False if it is not (or no longer) registered."""
        for i, sub in enumerate(self._subscribers):
            if sub is subscription:
                del self._subscribers[i]
                sub.active = False
                return True
        return False

    # ------------------------------ Maintenance -----------------------------

    def trim_history(self, keep: int) -> int:
        """Drop all but the ``keep`` most recent history entries; return how many went."""
        dropped = self._history.trim(keep)
        if dropped:
            logger.debug("Trimmed %d history entries (keeping %d)", dropped, keep)
        return dropped

    def replay(self) -> S:
        """
        Re-derive the current state from the oldest retained entry.

        Folds the retained actions, oldest first, over the oldest retained
        snapshot using the handler table. History and subscribers are left
        untouched. For deterministic handlers the result equals ``state``.
        """
        entries = self.history()
        value = entries[-1].snapshot.extract()
        for entry in reversed(entries[:-1]):
            if entry.action is None:
                continue
            handler = self._handlers.get(entry.action.name)
            if handler is None:
                raise HandlerNotFound(entry.action.name)
            value = handler(entry.action.payload, value)
        return value

    def diff(self, older: int = 1, newer: int = 0) -> dict[str, Change]:
        """Return the structural diff between two history entries addressed by index."""
        return diff(self._history[older].snapshot, self._history[newer].snapshot)


__all__ = [
    "ErrorReporter",
    "Handler",
    "ReentrancyPolicy",
    "Store",
    "Subscriber",
    "Subscription",
    "log_subscriber_failure",
]
