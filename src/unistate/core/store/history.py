"""
Append-only history log of committed snapshots.

The log is ordered most-recent-first: index 0 is the current entry, and each
entry's snapshot is the result of applying its ``action`` to the snapshot of
the next (older) entry. The initial entry is the only one without an action.

Retention
---------
An unbounded log grows for the life of the store. ``RetentionPolicy`` turns the
log into a ring buffer of the last ``max_entries`` entries instead, and
``History.trim`` drops old entries on demand. Trimming never reorders or
rewrites what is kept; ``revision`` numbers keep counting from where they were,
so the current revision is always the number of actions committed so far.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from .snapshot import Snapshot

S = TypeVar("S")


@dataclass(frozen=True, slots=True)
class ActionDescriptor:
    """A named request to transition state.

    Attributes
    ----------
    name : str
        Key into the store's handler table.
    payload : Any
        Opaque data handed to the handler untouched.
    """

    name: str
    payload: Any = None


@dataclass(frozen=True, slots=True)
class HistoryEntry(Generic[S]):
    """One committed (snapshot, action) pair.

    Attributes
    ----------
    snapshot : Snapshot[S]
        The state produced by ``action``.
    action : ActionDescriptor | None
        The action that produced ``snapshot``; ``None`` for the initial entry.
    revision : int
        0 for the initial entry, +1 for every committed action.
    """

    snapshot: Snapshot[S]
    action: ActionDescriptor | None
    revision: int


class RetentionPolicy(BaseModel):
    """How many history entries a store keeps.

    ``max_entries=None`` keeps everything; an integer keeps only the most
    recent ``max_entries`` entries (the current one included).
    """

    model_config = ConfigDict(frozen=True)

    max_entries: int | None = Field(default=None, ge=1)

    @property
    def bounded(self) -> bool:
        return self.max_entries is not None


class History(Generic[S]):
    """Most-recent-first log of :class:`HistoryEntry` objects. Never empty."""

    __slots__ = ("_entries", "_policy")

    def __init__(self, initial: HistoryEntry[S], policy: RetentionPolicy | None = None) -> None:
        self._policy = policy or RetentionPolicy()
        self._entries: deque[HistoryEntry[S]] = deque([initial], maxlen=self._policy.max_entries)

    @property
    def policy(self) -> RetentionPolicy:
        return self._policy

    @property
    def current(self) -> HistoryEntry[S]:
        return self._entries[0]

    @property
    def oldest(self) -> HistoryEntry[S]:
        return self._entries[-1]

    def commit(self, entry: HistoryEntry[S]) -> None:
        """Prepend ``entry``; when bounded, the oldest entry falls off the end."""
        self._entries.appendleft(entry)

    def trim(self, keep: int) -> int:
        """Drop all but the ``keep`` most recent entries and return how many were dropped."""
        if keep < 1:
            raise ValueError(f"History must keep at least one entry (got keep={keep})")
        dropped = 0
        while len(self._entries) > keep:
            self._entries.pop()
            dropped += 1
        return dropped

    def entries(self) -> tuple[HistoryEntry[S], ...]:
        """Return all retained entries (immutable tuple, most-recent-first)."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> HistoryEntry[S]:
        return self._entries[index]

    def __iter__(self) -> Iterator[HistoryEntry[S]]:
        return iter(tuple(self._entries))


__all__ = ["ActionDescriptor", "History", "HistoryEntry", "RetentionPolicy"]
