"""
Snapshot definition.

This module defines the immutable wrapper around one state value. It is kept
apart from ``memory.py`` so the history log and the diff helpers can import it
without pulling in the store itself.

Design Notes
------------
- **Immutability**: Once created, a snapshot never changes. We use
  ``frozen=True`` and every transformation returns a *new* instance.
- **Opaque values**: The snapshot does not copy or freeze what it wraps. Keeping
  the wrapped value untouched is the job of the handlers that produce it (see
  ``unistate.todo.handlers`` for frozen pydantic states).
- **map / extend**: ``map`` feeds the bare value to a function; ``extend``
  feeds the whole snapshot. ``map(f)`` is ``extend(lambda s: f(s.extract()))``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

S = TypeVar("S")
R = TypeVar("R")


@dataclass(frozen=True, slots=True)
class Snapshot(Generic[S]):
    """
    Immutable record of one state value.

    Attributes
    ----------
    value : S
        The wrapped state. Never reassigned through the snapshot interface.
    """

    value: S

    def extract(self) -> S:
        """Return the wrapped value as-is."""
        return self.value

    def map(self, fn: Callable[[S], R]) -> Snapshot[R]:
        """
        Return a new snapshot wrapping ``fn(self.extract())``.

        If ``fn`` raises, the exception propagates and no snapshot is built.
        """
        return Snapshot(fn(self.extract()))

    def extend(self, fn: Callable[[Snapshot[S]], R]) -> Snapshot[R]:
        """Return a new snapshot wrapping ``fn(self)``."""
        return Snapshot(fn(self))
