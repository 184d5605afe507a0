"""
Storage protocol the cache is built on.

A Storage is a synchronous, string-only, flat key-value store with
enumeration by index, modelled on browser local storage. Writes may fail
with a capacity error once a quota is reached.
"""

from __future__ import annotations

from typing import Iterator, Protocol, runtime_checkable


@runtime_checkable
class Storage(Protocol):
    """Interface for cache storage backends."""

    @property
    def length(self) -> int:
        """Number of records in storage."""
        ...

    def key(self, index: int) -> str | None:
        """Key at the given enumeration index, or None if out of range."""
        ...

    def get_item(self, key: str) -> str | None:
        """Stored value for key, or None."""
        ...

    def set_item(self, key: str, value: str) -> None:
        """Store a value, raising a capacity error when the quota is exhausted."""
        ...

    def remove_item(self, key: str) -> None:
        """Remove a key. Removing a missing key is a no-op."""
        ...

    def clear(self) -> None:
        """Remove every record, including ones the cache does not own."""
        ...


def iter_keys(storage: Storage) -> Iterator[str]:
    """Enumerate storage keys by index.

    The storage must not be mutated while iterating.
    """
    for index in range(storage.length):
        key = storage.key(index)
        if key is not None:
            yield key
