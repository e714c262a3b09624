"""Shared fixtures: keep cached settings from leaking between tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from unistate.core.settings import load_settings


@pytest.fixture(autouse=True)  # type: ignore[misc]
def fresh_settings() -> Iterator[None]:
    """Rebuild settings after each test so env overrides stay local to it."""
    yield
    load_settings.cache_clear()
