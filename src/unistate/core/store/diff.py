"""Structural diff between two state values.

Looking at a whole state after every action quickly gets noisy. ``diff``
answers "what did this transition change?" by walking both values and
reporting only the paths whose leaves differ::

    >>> diff({"todos": [{"status": "InProgress"}]}, {"todos": [{"status": "Complete"}]})
    {'todos[0].status': ('InProgress', 'Complete')}

Values are first normalized to plain data so pydantic models, dataclasses,
tuples and enums compare the same way their JSON form would. A key or list
position present on only one side is reported with ``MISSING`` on the other,
so it is never confused with an explicit ``None``.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .snapshot import Snapshot

Change = tuple[Any, Any]


class _Missing:
    """Marker for a key or list position absent on one side of a diff."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<missing>"


MISSING: Any = _Missing()


def _plain(value: Any) -> Any:
    """Return a plain-data (dict / list / scalar) view of ``value``."""
    if isinstance(value, Snapshot):
        return _plain(value.extract())
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _plain(dataclasses.asdict(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_plain(v) for v in value]
    return value


def _walk(path: str, before: Any, after: Any, out: dict[str, Change]) -> None:
    if isinstance(before, dict) and isinstance(after, dict):
        for key in sorted(before.keys() | after.keys()):
            sub = f"{path}.{key}" if path else key
            _walk(sub, before.get(key, MISSING), after.get(key, MISSING), out)
        return
    if isinstance(before, list) and isinstance(after, list):
        for i in range(max(len(before), len(after))):
            left = before[i] if i < len(before) else MISSING
            right = after[i] if i < len(after) else MISSING
            _walk(f"{path}[{i}]", left, right, out)
        return
    if before != after:
        out[path or "."] = (before, after)


def diff(before: Any, after: Any) -> dict[str, Change]:
    """Return ``{path: (old, new)}`` for every leaf that differs between the two values."""
    out: dict[str, Change] = {}
    _walk("", _plain(before), _plain(after), out)
    return out


__all__ = ["MISSING", "Change", "diff"]
