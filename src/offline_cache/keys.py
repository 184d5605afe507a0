"""
Physical key encoding for cache records.

Every cache entry occupies up to two records in the shared flat storage:

- data record:   <prefix><logical key>
- expiry record: <prefix><logical key><suffix>

The default prefix and suffix are built from rarely used characters so the
cache can share storage with unrelated data. They must stay stable across
releases or previously stored entries become unreachable.
"""

from __future__ import annotations

from dataclasses import dataclass

from offline_cache.exceptions import ConfigurationError

DEFAULT_KEY_PREFIX = "\u2023\u00a0\u00a0"
DEFAULT_EXPIRY_SUFFIX = "\u00a0\u00a0\u03bb"
PROBE_MARKER = "\u2203"


@dataclass(frozen=True)
class KeyCodec:
    """Maps logical cache keys to physical storage keys and back."""

    prefix: str = DEFAULT_KEY_PREFIX
    suffix: str = DEFAULT_EXPIRY_SUFFIX

    def __post_init__(self) -> None:
        if not self.prefix:
            raise ConfigurationError("Key prefix must not be empty")
        if not self.suffix:
            raise ConfigurationError("Expiry suffix must not be empty")

    def data_key(self, logical_key: str) -> str:
        """Physical key of the data record for a logical key."""
        return self.prefix + logical_key

    def expiry_key(self, key: str) -> str:
        """Key of the expiry record paired with a logical or physical key."""
        return key + self.suffix

    def owns(self, physical_key: str | None, data_only: bool = False) -> bool:
        """Whether a physical key belongs to this cache.

        Args:
            physical_key: Key as enumerated from storage.
            data_only: Reject expiry records, accepting only data records.

        Returns:
            True if the key carries the namespace prefix (and, with
            data_only, is not an expiry record).
        """
        if not physical_key or not physical_key.startswith(self.prefix):
            return False
        if data_only and self.suffix in physical_key:
            return False
        return True

    def logical_key(self, physical_key: str) -> str:
        """Strip the namespace prefix from an owned physical key."""
        return physical_key[len(self.prefix):]

    def probe_key(self) -> str:
        """Key used for the one-time storage availability probe."""
        return self.prefix + PROBE_MARKER + self.suffix
