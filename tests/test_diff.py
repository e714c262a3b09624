"""Unit tests for the structural state diff."""

from __future__ import annotations

from dataclasses import dataclass

from unistate.core.store import MISSING, Snapshot, diff
from unistate.todo import TodoItem, TodoState, TodoStatus


def test_equal_values_have_no_changes() -> None:
    assert diff({"a": [1, 2]}, {"a": [1, 2]}) == {}


def test_nested_paths_are_dotted_and_indexed() -> None:
    before = {"todos": [{"status": "InProgress"}], "filters": []}
    after = {"todos": [{"status": "Complete"}], "filters": []}
    assert diff(before, after) == {"todos[0].status": ("InProgress", "Complete")}


def test_list_growth_reports_missing_side() -> None:
    assert diff([1], [1, 2]) == {"[1]": (MISSING, 2)}
    assert diff({"x": [1, 2]}, {"x": [1]}) == {"x[1]": (2, MISSING)}


def test_pydantic_models_and_snapshots_are_normalized() -> None:
    """Models compare through their JSON form; snapshots are unwrapped."""
    before = TodoState(todos=(TodoItem(text="a"),))
    after = TodoState(todos=(TodoItem(text="a", status=TodoStatus.COMPLETE), TodoItem(text="b")))

    changes = diff(Snapshot(before), Snapshot(after))
    assert changes == {
        "todos[0].status": ("InProgress", "Complete"),
        "todos[1]": (MISSING, {"text": "b", "status": "InProgress"}),
    }


def test_dataclasses_are_normalized() -> None:
    @dataclass
    class Point:
        x: int
        y: int

    assert diff(Point(1, 2), Point(1, 3)) == {"y": (2, 3)}


def test_scalar_change_uses_root_path() -> None:
    assert diff(1, 2) == {".": (1, 2)}


def test_removed_key_holding_none_is_reported() -> None:
    """A dropped key is a change even when its old value was None."""
    assert diff({"a": None}, {}) == {"a": (None, MISSING)}
    assert diff({}, {"a": None}) == {"a": (MISSING, None)}


def test_none_element_versus_missing_position() -> None:
    assert diff([None], []) == {"[0]": (None, MISSING)}
    assert diff([None], [None]) == {}
    assert repr(MISSING) == "<missing>"
