"""
Pure reducers for the todo domain and the store factory.

Each handler has the store's handler signature ``(payload, state) -> state``
and never touches its input: the returned ``TodoState`` is a fresh model whose
``todos`` tuple is rebuilt, with unchanged items shared by reference (they are
frozen, so sharing is safe).

Index payloads accept either a :class:`TodoIndex` or a plain mapping such as
``{"index": 0}``; both are validated here so the raw-dispatch path gets the
same checks as the typed one.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from unistate.core.store import Store

from .actions import ACTION_TYPES, ActionName, TodoIndex
from .contracts import TodoItem, TodoState, TodoStatus, initial_state

TodoHandler = Callable[[Any, TodoState], TodoState]


def _position(payload: Any, state: TodoState) -> int:
    index = TodoIndex.model_validate(payload).index
    if index >= len(state.todos):
        raise IndexError(f"No todo at index {index} (list has {len(state.todos)} items)")
    return index


def _with_status(payload: Any, state: TodoState, status: TodoStatus) -> TodoState:
    index = _position(payload, state)
    todos = list(state.todos)
    todos[index] = todos[index].model_copy(update={"status": status})
    return state.model_copy(update={"todos": tuple(todos)})


def add_todo(payload: Any, state: TodoState) -> TodoState:
    """Append a new in-progress todo whose text is ``payload``."""
    item = TodoItem(text=str(payload), status=TodoStatus.IN_PROGRESS)
    return state.model_copy(update={"todos": (*state.todos, item)})


def complete_todo(payload: Any, state: TodoState) -> TodoState:
    """Mark the todo at ``payload.index`` as complete."""
    return _with_status(payload, state, TodoStatus.COMPLETE)


def in_progress_todo(payload: Any, state: TodoState) -> TodoState:
    """Mark the todo at ``payload.index`` as in progress again."""
    return _with_status(payload, state, TodoStatus.IN_PROGRESS)


def remove_todo(payload: Any, state: TodoState) -> TodoState:
    """Drop the todo at ``payload.index``."""
    index = _position(payload, state)
    todos = state.todos[:index] + state.todos[index + 1 :]
    return state.model_copy(update={"todos": todos})


HANDLERS: Mapping[str, TodoHandler] = {
    ActionName.ADD_TODO: add_todo,
    ActionName.COMPLETE_TODO: complete_todo,
    ActionName.INPROGRESS_TODO: in_progress_todo,
    ActionName.REMOVE_TODO: remove_todo,
}


def _check_exhaustive() -> None:
    """Fail at import time if an action variant has no handler (or vice versa)."""
    names = set(ActionName)
    missing = names - set(HANDLERS)
    extra = set(HANDLERS) - names
    variants = {cls.model_fields["name"].default for cls in ACTION_TYPES}
    if missing or extra or variants != names:
        raise RuntimeError(
            f"Todo handler table out of sync: missing={sorted(missing)}, "
            f"extra={sorted(extra)}, variants={sorted(variants)}"
        )


_check_exhaustive()


def toggle_action_name(item: TodoItem) -> ActionName:
    """Return the action that flips ``item`` between in-progress and complete."""
    if item.status is TodoStatus.IN_PROGRESS:
        return ActionName.COMPLETE_TODO
    return ActionName.INPROGRESS_TODO


def create_store(state: TodoState | None = None, **kwargs: Any) -> Store[TodoState]:
    """Build a todo store starting from ``state`` (or the default initial state).

    Extra keyword arguments are forwarded to :class:`Store` (``retention``,
    ``reentrancy``, ``on_subscriber_error``).
    """
    return Store(state if state is not None else initial_state(), HANDLERS, **kwargs)


__all__ = [
    "HANDLERS",
    "TodoHandler",
    "add_todo",
    "complete_todo",
    "create_store",
    "in_progress_todo",
    "remove_todo",
    "toggle_action_name",
]
