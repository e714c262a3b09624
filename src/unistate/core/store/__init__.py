"""Snapshot history store: the immutable state log and its dispatch loop.

Import from here everywhere else:
    from unistate.core.store import Store, ActionDescriptor, HandlerNotFound
"""

from __future__ import annotations

from .diff import MISSING, diff
from .errors import (
    HandlerExecutionFailure,
    HandlerNotFound,
    ReentrantDispatch,
    StoreError,
    SubscriberFailure,
)
from .history import ActionDescriptor, History, HistoryEntry, RetentionPolicy
from .memory import ReentrancyPolicy, Store, Subscription, log_subscriber_failure
from .snapshot import Snapshot

__all__ = [
    "MISSING",
    "ActionDescriptor",
    "HandlerExecutionFailure",
    "HandlerNotFound",
    "History",
    "HistoryEntry",
    "ReentrancyPolicy",
    "ReentrantDispatch",
    "RetentionPolicy",
    "Snapshot",
    "Store",
    "StoreError",
    "SubscriberFailure",
    "Subscription",
    "diff",
    "log_subscriber_failure",
]
