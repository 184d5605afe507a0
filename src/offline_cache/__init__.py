"""
Offline cache: expiring values in quota-limited string storage.

Usage:
    from offline_cache import OfflineCache, MemoryStorage

    cache = OfflineCache(MemoryStorage(quota=5_000_000))
    cache.set("profile", {"name": "Pamela"}, ttl=300)
    cache.get("profile")

The module-level functions (offline_cache.get, offline_cache.set, ...)
use a shared instance configured from the environment.
"""

from offline_cache.api import enable_warnings, expire, fresh, flush, get, remove, set, supported
from offline_cache.cache import OfflineCache, clear_cache_instance, get_cache
from offline_cache.clock import Clock, ManualClock
from offline_cache.keys import KeyCodec
from offline_cache.serialization import JsonSerializer, PassthroughSerializer
from offline_cache.storage import MemoryStorage, SQLiteStorage, UnavailableStorage
from offline_cache.types import Absent, CachedValue, Raw, Structured

__all__ = [
    "Absent",
    "CachedValue",
    "Clock",
    "JsonSerializer",
    "KeyCodec",
    "ManualClock",
    "MemoryStorage",
    "OfflineCache",
    "PassthroughSerializer",
    "Raw",
    "SQLiteStorage",
    "Structured",
    "UnavailableStorage",
    "clear_cache_instance",
    "enable_warnings",
    "expire",
    "flush",
    "fresh",
    "get",
    "get_cache",
    "remove",
    "set",
    "supported",
]
