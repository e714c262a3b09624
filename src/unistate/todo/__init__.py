"""
Todo-list domain for the unistate store.

    from unistate.todo import create_store, AddTodo, parse_action

    store = create_store()
    store.dispatch_action(AddTodo(payload="Buy milk").to_descriptor())
"""

from __future__ import annotations

from .actions import (
    ACTION_TYPES,
    ActionName,
    AddTodo,
    CompleteTodo,
    InProgressTodo,
    RemoveTodo,
    TodoAction,
    TodoIndex,
    parse_action,
)
from .contracts import INITIAL_TODO_TEXT, TodoItem, TodoState, TodoStatus, initial_state
from .handlers import HANDLERS, create_store, toggle_action_name

__all__ = [
    "ACTION_TYPES",
    "HANDLERS",
    "INITIAL_TODO_TEXT",
    "ActionName",
    "AddTodo",
    "CompleteTodo",
    "InProgressTodo",
    "RemoveTodo",
    "TodoAction",
    "TodoIndex",
    "TodoItem",
    "TodoState",
    "TodoStatus",
    "create_store",
    "initial_state",
    "parse_action",
    "toggle_action_name",
]
