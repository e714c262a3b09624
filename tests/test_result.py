"""Unit tests for the Result container used by `Store.try_dispatch`."""

from __future__ import annotations

import pytest

from unistate.core.result import Err, Ok, Result, err, ok
from unistate.core.store import HandlerNotFound


def test_ok_map_and_unwrap() -> None:
    """`Ok` maps its value and unwraps to it."""
    r: Result[int, str] = ok(10)
    r2 = r.map(lambda x: x + 5)
    assert isinstance(r2, Ok)
    assert r2.is_ok() and r2.unwrap() == 15


def test_err_propagation_and_map_err() -> None:
    """`Err` passes through `map` and allows mapping the error."""
    r: Result[int, str] = err("boom")
    assert r.is_err()
    assert r.map(lambda x: x + 1).is_err()
    r2 = r.map_err(lambda e: f"{e}!")
    assert isinstance(r2, Err) and r2.unwrap_err() == "boom!"


def test_unwrap_reraises_exception_errors() -> None:
    """Unwrapping an `Err` that holds an exception re-raises that exception."""
    failure = HandlerNotFound("MISSING")
    with pytest.raises(HandlerNotFound) as info:
        err(failure).unwrap()
    assert info.value is failure


def test_unwrap_plain_error_raises_runtime_error() -> None:
    with pytest.raises(RuntimeError):
        err("nope").unwrap()
    with pytest.raises(RuntimeError):
        ok(1).unwrap_err()


def test_get_or_defaults() -> None:
    assert ok("x").get_or("fallback") == "x"
    assert err("e").get_or("fallback") == "fallback"
