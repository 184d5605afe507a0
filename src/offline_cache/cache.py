"""
OfflineCache: expiring cache on top of quota-limited string storage.

Each entry is a data record plus an expiry record (see keys.py). Writes
that hit the storage quota trigger one round of eviction and a single
retry. Public operations never raise: failures turn into a no-op, a
None/False result, and a log line when warnings are enabled.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from offline_cache import eviction, expiry
from offline_cache.clock import Clock
from offline_cache.config import build_storage, get_settings
from offline_cache.exceptions import SerializationError
from offline_cache.freshness import is_fresh
from offline_cache.keys import KeyCodec
from offline_cache.logging import get_logger, log_context, setup_logging
from offline_cache.serialization import JsonSerializer, Serializer
from offline_cache.storage import Storage, StoreErrorKind, classify_store_error
from offline_cache.types import ABSENT, CachedValue, Raw, Structured, unwrap

logger = get_logger(__name__)


class OfflineCache:
    """Expiring key-value cache over a Storage backend.

    Not thread-safe: eviction scans and then mutates storage, so callers
    sharing an instance across threads must serialize access.
    """

    def __init__(
        self,
        storage: Storage,
        serializer: Serializer | None = None,
        clock: Clock | None = None,
        codec: KeyCodec | None = None,
        warnings: bool = False,
    ) -> None:
        """Initialize OfflineCache.

        Args:
            storage: Backend holding the records.
            serializer: Value serializer. Defaults to JsonSerializer.
            clock: Time source for expiry. Defaults to the system clock.
            codec: Key namespace. Defaults to the standard prefix and suffix.
            warnings: Log internal failures.
        """
        self.storage = storage
        self.serializer = serializer or JsonSerializer()
        self.clock = clock or Clock()
        self.codec = codec or KeyCodec()
        self._warnings = warnings
        self._supported: bool | None = None

    def enable_warnings(self, enabled: bool = True) -> None:
        """Turn logging of internal failures on or off."""
        self._warnings = enabled

    @property
    def warnings_enabled(self) -> bool:
        return self._warnings

    def _warn(self, msg: str, *args: Any, error: BaseException | None = None, **context: Any) -> None:
        if not self._warnings:
            return
        if error is not None:
            context["error"] = str(error) or type(error).__name__
        logger.warning(msg, *args, **context)

    def supported(self) -> bool:
        """Whether the storage accepts writes.

        Probes once with a throwaway record; the answer, positive or
        negative, is kept for the life of this cache.
        """
        if self._supported is None:
            probe = self.codec.probe_key()
            try:
                self.storage.set_item(probe, probe)
                self.storage.remove_item(probe)
                self._supported = True
            except Exception as e:
                self._warn("Storage not supported", error=e)
                self._supported = False
        return self._supported

    def _set_record(self, physical_key: str, value: str) -> None:
        # Remove first so an overwrite only needs room for the new value
        self.storage.remove_item(physical_key)
        self.storage.set_item(physical_key, value)

    def _is_fresh(self, key: str) -> bool:
        try:
            return is_fresh(self.storage, self.codec, self.clock, key)
        except Exception as e:
            self._warn("Freshness check failed [%s]", key, error=e)
            return False

    def _remove(self, key: str) -> None:
        try:
            eviction.remove_entry(self.storage, self.codec, key)
        except Exception as e:
            self._warn("Remove failed [%s]", key, error=e)

    def fresh(self, key: str) -> bool:
        """Whether the entry exists and has not expired."""
        if not self.supported():
            return False
        with log_context(namespace=self.codec.prefix, operation="fresh"):
            return self._is_fresh(key)

    def lookup(self, key: str, expunge: bool = False) -> CachedValue:
        """Read an entry as Structured, Raw or Absent.

        Args:
            key: Logical key.
            expunge: Remove the entry and report it absent if it is stale.
        """
        if not self.supported():
            return ABSENT

        with log_context(namespace=self.codec.prefix, operation="get"):
            if expunge and not self._is_fresh(key):
                self._remove(key)
                return ABSENT

            try:
                text = self.storage.get_item(self.codec.data_key(key))
            except Exception as e:
                self._warn("Read failed [%s]", key, error=e)
                return ABSENT

            if text is None:
                return ABSENT
            if not text or not self.serializer.available:
                return Raw(text)

            try:
                return Structured(self.serializer.loads(text))
            except SerializationError:
                return Raw(text)

    def get(self, key: str, expunge: bool = False) -> Any | None:
        """Stored value for key, or None.

        Returns the deserialized value when possible and the raw stored
        string otherwise.

        Args:
            key: Logical key.
            expunge: Remove the entry and return None if it is stale.
        """
        return unwrap(self.lookup(key, expunge=expunge))

    def set(self, key: str, value: Any, ttl: float | None = None) -> bool:
        """Store a value.

        Args:
            key: Logical key.
            value: Value to store. Must be serializable, or a str when no
                serializer is available.
            ttl: Seconds until the entry goes stale. Absent or non-finite
                means no expiry; such entries are still evicted oldest first.

        Returns:
            True if the value was written.
        """
        if not self.supported():
            return False

        with log_context(namespace=self.codec.prefix, operation="set"):
            try:
                serialized = self.serializer.dumps(value)
            except SerializationError as e:
                self._warn("Value not serializable [%s]", key, error=e)
                return False

            encoded_expiry = expiry.encode(self.clock.now_plus(expiry.effective_ttl(ttl)))
            data_key = self.codec.data_key(key)

            if not self._write_data(key, data_key, serialized):
                return False

            try:
                self._set_record(self.codec.expiry_key(data_key), encoded_expiry)
            except Exception as e:
                self._warn(
                    "Expiry insert failed [%s]",
                    key,
                    error=e,
                )
            return True

    def _write_data(self, key: str, data_key: str, serialized: str) -> bool:
        """Write a data record, evicting and retrying once if storage is full."""
        try:
            self._set_record(data_key, serialized)
            return True
        except Exception as e:
            if classify_store_error(e) is not StoreErrorKind.CAPACITY_EXCEEDED:
                self._warn("Insert failed [%s]", key, error=e)
                self._drop_stale_expiry(data_key)
                return False

        try:
            eviction.expunge(
                self.storage,
                self.codec,
                len(serialized),
                logger=logger if self._warnings else None,
            )
            self._set_record(data_key, serialized)
            return True
        except Exception as e:
            # Value may be larger than the whole quota
            self._warn("Insert failed [%s]", key, error=e)
            self._drop_stale_expiry(data_key)
            return False

    def _drop_stale_expiry(self, data_key: str) -> None:
        try:
            self.storage.remove_item(self.codec.expiry_key(data_key))
        except Exception as e:
            self._warn("Expiry cleanup failed [%s]", self.codec.logical_key(data_key), error=e)

    def expire(self, key: str) -> None:
        """Mark a fresh entry stale without removing its data."""
        if not self.supported():
            return

        with log_context(namespace=self.codec.prefix, operation="expire"):
            if not self._is_fresh(key):
                return
            try:
                self._set_record(
                    self.codec.expiry_key(self.codec.data_key(key)),
                    expiry.encode(self.clock.now()),
                )
            except Exception as e:
                self._warn("Expire failed [%s]", key, error=e)

    def remove(self, key: str) -> None:
        """Remove an entry and its expiry record."""
        if not self.supported():
            return

        with log_context(namespace=self.codec.prefix, operation="remove"):
            self._remove(key)

    def flush(self, prefix: str = "") -> None:
        """Remove every cache record whose logical key starts with prefix.

        Records outside the cache namespace are left alone.
        """
        if not self.supported():
            return

        namespaced = self.codec.prefix + (prefix or "")
        with log_context(namespace=self.codec.prefix, operation="flush"):
            try:
                # Walk backwards: removals shift the indexes of later keys
                for index in range(self.storage.length - 1, -1, -1):
                    physical_key = self.storage.key(index)
                    if physical_key is not None and physical_key.startswith(namespaced):
                        self.storage.remove_item(physical_key)
            except Exception as e:
                self._warn("Flush failed [%s]", prefix, error=e)


@lru_cache
def get_cache() -> OfflineCache:
    """Get the process-wide cache built from settings.

    Built on first use; storage support is probed once per instance.
    """
    settings = get_settings()
    setup_logging(log_level=settings.LOG_LEVEL, log_file=settings.LOG_FILE)
    return OfflineCache(
        storage=build_storage(settings),
        codec=KeyCodec(prefix=settings.CACHE_KEY_PREFIX, suffix=settings.CACHE_EXPIRY_SUFFIX),
        warnings=settings.CACHE_WARNINGS,
    )


def clear_cache_instance() -> None:
    """Drop the process-wide cache (useful for testing)."""
    get_cache.cache_clear()
