"""unistate: a unidirectional-data-flow state container with an immutable history log.

Actions are dispatched to a :class:`~unistate.core.store.Store`, which derives a
new snapshot from the current one, appends it to its history and notifies its
subscribers. ``unistate.todo`` ships a small todo-list domain built on it.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.1.0"
