"""
Classification of storage failures.

Quota errors come in several vendor spellings. They are all mapped onto
StoreErrorKind.CAPACITY_EXCEEDED here so the cache never inspects raw
error names itself.
"""

from __future__ import annotations

import sqlite3
from enum import Enum

from offline_cache.exceptions import CapacityExceededError

CAPACITY_ERROR_NAMES = frozenset({
    "QUOTA_EXCEEDED_ERR",
    "NS_ERROR_DOM_QUOTA_REACHED",
    "QuotaExceededError",
})

_SQLITE_FULL_MESSAGES = ("database or disk is full", "database is full")


class StoreErrorKind(str, Enum):
    """How a failed storage write should be handled."""

    CAPACITY_EXCEEDED = "capacity_exceeded"
    STORE_FAILURE = "store_failure"


def classify_store_error(exc: BaseException) -> StoreErrorKind:
    """Classify an exception raised by a storage backend.

    Args:
        exc: The exception raised by a storage write.

    Returns:
        CAPACITY_EXCEEDED for any known quota error, STORE_FAILURE otherwise.
    """
    if isinstance(exc, CapacityExceededError):
        return StoreErrorKind.CAPACITY_EXCEEDED

    if getattr(exc, "name", None) in CAPACITY_ERROR_NAMES:
        return StoreErrorKind.CAPACITY_EXCEEDED

    if isinstance(exc, sqlite3.OperationalError):
        message = str(exc).lower()
        if any(text in message for text in _SQLITE_FULL_MESSAGES):
            return StoreErrorKind.CAPACITY_EXCEEDED

    return StoreErrorKind.STORE_FAILURE
