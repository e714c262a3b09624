"""Todo-list state contracts.

All models are frozen and hold tuples, never lists, so a state committed to a
store's history cannot be changed in place afterwards. Handlers derive new
states with ``model_copy(update=...)`` and share untouched items between
consecutive snapshots.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class TodoStatus(StrEnum):
    """Lifecycle of a single todo item."""

    IN_PROGRESS = "InProgress"
    COMPLETE = "Complete"


class TodoItem(BaseModel):
    """One entry of the todo list."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="What needs doing.")
    status: TodoStatus = Field(default=TodoStatus.IN_PROGRESS)


class TodoState(BaseModel):
    """Whole application state: the list plus the active view filters."""

    model_config = ConfigDict(frozen=True)

    todos: tuple[TodoItem, ...] = Field(default_factory=tuple)
    filters: tuple[str, ...] = Field(default_factory=tuple)


INITIAL_TODO_TEXT = "An Initial ToDo"


def initial_state() -> TodoState:
    """Return the state a fresh todo store starts from."""
    return TodoState(todos=(TodoItem(text=INITIAL_TODO_TEXT),), filters=())


__all__ = ["INITIAL_TODO_TEXT", "TodoItem", "TodoState", "TodoStatus", "initial_state"]
