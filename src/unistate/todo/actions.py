"""
Typed todo actions and the boundary parser for untyped input.

Every action the todo domain understands is one variant of the ``TodoAction``
discriminated union. Each variant pins its ``name`` with a ``Literal`` and
declares its payload type, so code that builds actions in Python gets them
checked by pydantic, and ``handlers.HANDLERS`` can be verified to cover every
variant.

Untyped input (a JSON script, a UI event) goes through :func:`parse_action`:

- a known name is validated against its variant (bad payload -> ``ValidationError``),
- an unknown name is passed through as a raw descriptor so the store reports
  ``HandlerNotFound``, which is the failure callers are prepared for.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from unistate.core.store import ActionDescriptor

from .contracts import TodoItem


class ActionName(StrEnum):
    """Closed set of action names handled by the todo store."""

    ADD_TODO = "ADD_TODO"
    COMPLETE_TODO = "COMPLETE_TODO"
    INPROGRESS_TODO = "INPROGRESS_TODO"
    REMOVE_TODO = "REMOVE_TODO"


class TodoIndex(BaseModel):
    """Payload addressing one existing todo by position.

    ``item`` is the todo the UI believed sat at ``index`` when the event fired.
    It is informational only; handlers act on ``index``.
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0, description="0-based position in `TodoState.todos`.")
    item: TodoItem | None = Field(default=None)


class _Action(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_descriptor(self) -> ActionDescriptor:
        """Return the store-level descriptor for this action."""
        return ActionDescriptor(self.name, self.payload)  # type: ignore[attr-defined]


class AddTodo(_Action):
    name: Literal["ADD_TODO"] = "ADD_TODO"
    payload: str = Field(..., description="Text of the new todo.")


class CompleteTodo(_Action):
    name: Literal["COMPLETE_TODO"] = "COMPLETE_TODO"
    payload: TodoIndex


class InProgressTodo(_Action):
    name: Literal["INPROGRESS_TODO"] = "INPROGRESS_TODO"
    payload: TodoIndex


class RemoveTodo(_Action):
    name: Literal["REMOVE_TODO"] = "REMOVE_TODO"
    payload: TodoIndex


TodoAction = Annotated[
    AddTodo | CompleteTodo | InProgressTodo | RemoveTodo,
    Field(discriminator="name"),
]

ACTION_TYPES: tuple[type[_Action], ...] = (AddTodo, CompleteTodo, InProgressTodo, RemoveTodo)

_todo_action_adapter: TypeAdapter[Any] = TypeAdapter(TodoAction)
_KNOWN_NAMES = frozenset(member.value for member in ActionName)


class RawAction(BaseModel):
    """Envelope every untyped action must satisfy before its name is inspected."""

    name: str = Field(..., min_length=1)
    payload: Any = None


def parse_action(raw: Mapping[str, Any] | ActionDescriptor) -> ActionDescriptor:
    """
    Turn untyped input into an :class:`ActionDescriptor`.

    Parameters
    ----------
    raw : Mapping[str, Any] | ActionDescriptor
        ``{"name": ..., "payload": ...}`` as read from JSON, or a descriptor
        built elsewhere.

    Returns
    -------
    ActionDescriptor
        Validated descriptor for known names; the raw name/payload otherwise.

    Raises
    ------
    pydantic.ValidationError
        The envelope is malformed, or a known action carries a bad payload.
    """
    if isinstance(raw, ActionDescriptor):
        raw = {"name": raw.name, "payload": raw.payload}
    envelope = RawAction.model_validate(raw)
    if envelope.name not in _KNOWN_NAMES:
        return ActionDescriptor(envelope.name, envelope.payload)
    action = _todo_action_adapter.validate_python(
        {"name": envelope.name, "payload": envelope.payload}
    )
    descriptor: ActionDescriptor = action.to_descriptor()
    return descriptor


__all__ = [
    "ACTION_TYPES",
    "ActionName",
    "AddTodo",
    "CompleteTodo",
    "InProgressTodo",
    "RawAction",
    "RemoveTodo",
    "TodoAction",
    "TodoIndex",
    "parse_action",
]
