"""Unit tests for the immutable Snapshot wrapper."""

from __future__ import annotations

import pytest

from unistate.core.store import Snapshot


def test_extract_returns_wrapped_value() -> None:
    """`extract()` hands back the exact object that was wrapped."""
    value = {"todos": [], "filters": []}
    snap = Snapshot(value)
    assert snap.extract() is value


def test_map_builds_new_snapshot_and_keeps_receiver() -> None:
    """`map(f)` wraps `f(value)` in a new snapshot; the receiver is untouched."""
    snap = Snapshot((1, 2, 3))
    mapped = snap.map(lambda t: (*t, 4))

    assert mapped is not snap
    assert mapped.extract() == (1, 2, 3, 4)
    assert snap.extract() == (1, 2, 3)


def test_map_law_holds_for_several_functions() -> None:
    """`s.map(f).extract() == f(s.extract())`."""
    snap = Snapshot(10)
    for fn in (lambda x: x + 1, lambda x: x * x, str):
        assert snap.map(fn).extract() == fn(snap.extract())


def test_extend_receives_whole_snapshot() -> None:
    """`extend(f)` calls `f` with the snapshot itself."""
    snap = Snapshot("abc")
    seen: list[Snapshot[str]] = []

    def peek(s: Snapshot[str]) -> int:
        seen.append(s)
        return len(s.extract())

    out = snap.extend(peek)
    assert seen == [snap]
    assert out.extract() == 3
    assert snap.extend(lambda s: s.extract().upper()) == snap.map(str.upper)


def test_map_propagates_exceptions() -> None:
    """A raising function propagates unchanged and produces nothing."""
    snap = Snapshot(0)
    with pytest.raises(ZeroDivisionError):
        snap.map(lambda x: 1 / x)
    assert snap.extract() == 0


def test_snapshot_is_frozen() -> None:
    """The wrapped value cannot be reassigned through the snapshot."""
    snap = Snapshot(1)
    with pytest.raises(AttributeError):
        snap.value = 2  # type: ignore[misc]
