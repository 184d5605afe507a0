"""
In-process storage backends.

MemoryStorage is a dict with an optional quota counted in characters of
key plus value across all records. UnavailableStorage fails every call,
standing in for storage that is disabled or missing.
"""

from __future__ import annotations

from offline_cache.exceptions import QuotaExceededError, StoreError, UnsupportedError


class MemoryStorage:
    """Dict-backed storage with insertion-order enumeration.

    Overwriting a key keeps its enumeration position.
    """

    def __init__(self, quota: int | None = None) -> None:
        self.quota = quota
        self._items: dict[str, str] = {}
        self._used = 0

    @property
    def length(self) -> int:
        return len(self._items)

    @property
    def used(self) -> int:
        """Characters currently in use."""
        return self._used

    def key(self, index: int) -> str | None:
        if 0 <= index < len(self._items):
            return list(self._items)[index]
        return None

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StoreError(
                "Storage only accepts strings",
                context={"operation": "set_item", "key": key},
            )

        existing = self._items.get(key)
        freed = len(key) + len(existing) if existing is not None else 0
        needed = len(key) + len(value)

        if self.quota is not None and self._used - freed + needed > self.quota:
            raise QuotaExceededError(
                "Storage quota exceeded",
                context={"quota": self.quota, "used": self._used, "requested": needed},
            )

        self._items[key] = value
        self._used += needed - freed

    def remove_item(self, key: str) -> None:
        existing = self._items.pop(key, None)
        if existing is not None:
            self._used -= len(key) + len(existing)

    def clear(self) -> None:
        self._items.clear()
        self._used = 0


class UnavailableStorage:
    """Storage whose every operation fails."""

    def __init__(self, reason: str = "storage is disabled") -> None:
        self.reason = reason

    def _fail(self, operation: str) -> UnsupportedError:
        return UnsupportedError(self.reason, context={"operation": operation})

    @property
    def length(self) -> int:
        raise self._fail("length")

    def key(self, index: int) -> str | None:
        raise self._fail("key")

    def get_item(self, key: str) -> str | None:
        raise self._fail("get_item")

    def set_item(self, key: str, value: str) -> None:
        raise self._fail("set_item")

    def remove_item(self, key: str) -> None:
        raise self._fail("remove_item")

    def clear(self) -> None:
        raise self._fail("clear")
