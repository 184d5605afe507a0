"""
Core types for the offline cache.

- CachedValue: what a read found (Structured | Raw | Absent)
- EvictionCandidate: a cache entry as seen by the eviction engine
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Structured:
    """A stored value that deserialized successfully."""

    value: Any


@dataclass(frozen=True)
class Raw:
    """A stored string returned as-is (no serializer, or it could not parse)."""

    text: str


@dataclass(frozen=True)
class Absent:
    """No data record for the key."""


CachedValue = Union[Structured, Raw, Absent]

ABSENT = Absent()


def unwrap(cached: CachedValue) -> Any | None:
    """Plain Python value for a read result; None when absent."""
    if isinstance(cached, Structured):
        return cached.value
    if isinstance(cached, Raw):
        return cached.text
    return None


@dataclass(frozen=True)
class EvictionCandidate:
    """A cache entry considered for eviction.

    Attributes:
        key: Logical key of the entry.
        size: Length of the stored data record in characters.
        expiry: Decoded expiry timestamp in seconds.
    """

    key: str
    size: int
    expiry: int
