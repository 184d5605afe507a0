"""Freshness test for cache entries."""

from __future__ import annotations

from offline_cache import expiry
from offline_cache.clock import Clock
from offline_cache.keys import KeyCodec
from offline_cache.storage.base import Storage


def read_expiry(storage: Storage, codec: KeyCodec, logical_key: str) -> int:
    """Decoded expiry of an entry; MAX_TIMESTAMP when it has no expiry record."""
    return expiry.decode(storage.get_item(codec.expiry_key(codec.data_key(logical_key))))


def is_fresh(storage: Storage, codec: KeyCodec, clock: Clock, logical_key: str) -> bool:
    """Whether an entry exists and its expiry is still in the future.

    Stale entries are left in place.
    """
    if not storage.get_item(codec.data_key(logical_key)):
        return False
    return clock.now() < read_expiry(storage, codec, logical_key)
