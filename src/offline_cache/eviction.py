"""
Eviction engine.

When a write fails because storage is full, the cache frees roughly the
size of the new value by removing entries closest to expiry first.
Entries written without a TTL all carry an expiry half the timestamp
range away from their write time, so among them the oldest goes first.
"""

from __future__ import annotations

import time

from offline_cache.freshness import read_expiry
from offline_cache.keys import KeyCodec
from offline_cache.logging import ContextLogger
from offline_cache.storage.base import Storage, iter_keys
from offline_cache.types import EvictionCandidate


def collect_candidates(storage: Storage, codec: KeyCodec) -> list[EvictionCandidate]:
    """Build an eviction candidate for every data record the cache owns.

    Args:
        storage: Storage to scan.
        codec: Key codec identifying cache-owned data records.

    Returns:
        Candidates in storage enumeration order.
    """
    candidates: list[EvictionCandidate] = []
    for physical_key in list(iter_keys(storage)):
        if not codec.owns(physical_key, data_only=True):
            continue
        logical_key = codec.logical_key(physical_key)
        value = storage.get_item(physical_key)
        candidates.append(
            EvictionCandidate(
                key=logical_key,
                size=len(value) if value is not None else 0,
                expiry=read_expiry(storage, codec, logical_key),
            )
        )
    return candidates


def remove_entry(storage: Storage, codec: KeyCodec, logical_key: str) -> None:
    """Remove both the data and expiry records of an entry."""
    data_key = codec.data_key(logical_key)
    storage.remove_item(data_key)
    storage.remove_item(codec.expiry_key(data_key))


def expunge(
    storage: Storage,
    codec: KeyCodec,
    target: int,
    logger: ContextLogger | None = None,
) -> list[str]:
    """Evict entries until at least `target` characters are freed.

    Candidates are sorted by expiry descending and consumed from the end,
    so the entry expiring soonest goes first. Ties keep enumeration order
    in the sort, which means the later-enumerated one is evicted first.

    Args:
        storage: Storage to evict from.
        codec: Key codec for the cache namespace.
        target: Characters to free.
        logger: Optional logger for eviction diagnostics.

    Returns:
        Logical keys evicted, in eviction order.
    """
    start = time.perf_counter()

    candidates = collect_candidates(storage, codec)
    candidates.sort(key=lambda c: c.expiry, reverse=True)

    evicted: list[str] = []
    remaining = target
    while candidates and remaining > 0:
        candidate = candidates.pop()
        remove_entry(storage, codec, candidate.key)
        evicted.append(candidate.key)
        remaining -= candidate.size
        if logger:
            logger.debug(
                "Expunged [%s]", candidate.key, size=candidate.size, expiry=candidate.expiry
            )

    if logger:
        logger.debug(
            "Expunge took %.1fms",
            (time.perf_counter() - start) * 1000,
            target=target,
            evicted=len(evicted),
        )

    return evicted
