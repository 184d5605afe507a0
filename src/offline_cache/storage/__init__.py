"""Storage backends for the offline cache."""

from offline_cache.storage.base import Storage, iter_keys
from offline_cache.storage.errors import (
    CAPACITY_ERROR_NAMES,
    StoreErrorKind,
    classify_store_error,
)
from offline_cache.storage.memory import MemoryStorage, UnavailableStorage
from offline_cache.storage.sqlite import SQLiteStorage

__all__ = [
    "CAPACITY_ERROR_NAMES",
    "MemoryStorage",
    "SQLiteStorage",
    "Storage",
    "StoreErrorKind",
    "UnavailableStorage",
    "classify_store_error",
    "iter_keys",
]
