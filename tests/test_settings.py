"""Typed smoke tests for the settings loader.

These tests verify four guarantees:
1) Importing the module-level `settings` yields a `Settings` instance.
2) Environment variables override defaults after clearing the loader cache.
3) Store-related settings (history limit, reentrancy) are validated.
4) `get_logger()` respects the configured LOG_LEVEL when constructing loggers.
"""

from __future__ import annotations

import logging
from typing import Any

import pytest
from pydantic import ValidationError

from unistate.core.settings import (
    Settings,
    get_logger,
    load_settings,
    settings,
)


def test_settings_instance_type() -> None:
    """`settings` should be an instance of the typed `Settings` model."""
    assert isinstance(settings, Settings)


def test_defaults_keep_unbounded_history(monkeypatch: Any) -> None:
    monkeypatch.delenv("UNISTATE_HISTORY_LIMIT", raising=False)
    monkeypatch.delenv("UNISTATE_REENTRANCY", raising=False)
    load_settings.cache_clear()
    s = load_settings()

    assert s.history_limit is None
    assert s.reentrancy == "reject"


def test_env_overrides_with_cache_clear(monkeypatch: Any) -> None:
    """Changing env vars should take effect after `load_settings.cache_clear()`."""
    monkeypatch.setenv("UNISTATE_ENV", "test")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("UNISTATE_HISTORY_LIMIT", "50")
    monkeypatch.setenv("UNISTATE_REENTRANCY", "queue")

    load_settings.cache_clear()
    s = load_settings()

    assert s.environment == "test"
    assert s.log_level == "DEBUG"
    assert s.history_limit == 50
    assert s.reentrancy == "queue"


def test_invalid_history_limit_is_rejected(monkeypatch: Any) -> None:
    monkeypatch.setenv("UNISTATE_HISTORY_LIMIT", "0")
    load_settings.cache_clear()
    with pytest.raises(ValidationError):
        load_settings()


def test_get_logger_respects_level(monkeypatch: Any) -> None:
    """`get_logger()` should apply the numeric level derived from `LOG_LEVEL`."""
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    load_settings.cache_clear()

    logger = get_logger("unistate.tests.settings")

    assert logger.level == logging.ERROR
    assert logger.handlers, "Expected at least one StreamHandler to be attached."
    assert logger.propagate is False
