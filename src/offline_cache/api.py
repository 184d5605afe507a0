"""Module-level shortcuts to the process-wide cache returned by get_cache()."""

from __future__ import annotations

from typing import Any

from offline_cache.cache import get_cache


def supported() -> bool:
    return get_cache().supported()


def fresh(key: str) -> bool:
    return get_cache().fresh(key)


def get(key: str, expunge: bool = False) -> Any | None:
    return get_cache().get(key, expunge=expunge)


def set(key: str, value: Any, ttl: float | None = None) -> bool:  # noqa: A001
    return get_cache().set(key, value, ttl)


def expire(key: str) -> None:
    get_cache().expire(key)


def remove(key: str) -> None:
    get_cache().remove(key)


def flush(prefix: str = "") -> None:
    get_cache().flush(prefix)


def enable_warnings(enabled: bool = True) -> None:
    get_cache().enable_warnings(enabled)
