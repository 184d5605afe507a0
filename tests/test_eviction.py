"""
Tests for the freshness check and the eviction engine.
"""

from __future__ import annotations

import pytest

from offline_cache import expiry
from offline_cache.clock import ManualClock
from offline_cache.eviction import collect_candidates, expunge, remove_entry
from offline_cache.expiry import MAX_TIMESTAMP
from offline_cache.freshness import is_fresh, read_expiry
from offline_cache.keys import KeyCodec
from offline_cache.storage import MemoryStorage
from offline_cache.types import EvictionCandidate

from tests.conftest import write_entry


class TestFreshness:
    """Test is_fresh and read_expiry."""

    def test_fresh_before_expiry(
        self, storage: MemoryStorage, codec: KeyCodec, clock: ManualClock
    ) -> None:
        """Test an entry is fresh strictly before its expiry."""
        write_entry(storage, codec, "a", '"x"', expiry.encode(clock.now() + 5))

        assert is_fresh(storage, codec, clock, "a")
        clock.advance(4)
        assert is_fresh(storage, codec, clock, "a")
        clock.advance(1)
        assert not is_fresh(storage, codec, clock, "a")

    def test_missing_entry_is_not_fresh(
        self, storage: MemoryStorage, codec: KeyCodec, clock: ManualClock
    ) -> None:
        """Test absent data is never fresh, even with an expiry record."""
        storage.set_item(codec.expiry_key(codec.data_key("a")), expiry.encode(clock.now() + 60))
        assert not is_fresh(storage, codec, clock, "a")

    def test_missing_expiry_is_fresh(
        self, storage: MemoryStorage, codec: KeyCodec, clock: ManualClock
    ) -> None:
        """Test data without an expiry record never goes stale."""
        write_entry(storage, codec, "a", '"x"')

        assert read_expiry(storage, codec, "a") == MAX_TIMESTAMP
        assert is_fresh(storage, codec, clock, "a")

    def test_check_has_no_side_effects(
        self, storage: MemoryStorage, codec: KeyCodec, clock: ManualClock
    ) -> None:
        """Test stale records are left in storage."""
        write_entry(storage, codec, "a", '"x"', expiry.encode(clock.now()))

        assert not is_fresh(storage, codec, clock, "a")
        assert storage.length == 2


class TestCollectCandidates:
    """Test candidate collection."""

    def test_skips_foreign_and_expiry_records(
        self, storage: MemoryStorage, codec: KeyCodec
    ) -> None:
        """Test only cache data records become candidates."""
        storage.set_item("outside-cache", "not part of the cache")
        write_entry(storage, codec, "a", "12345", expiry.encode(100))
        write_entry(storage, codec, "b", "123")

        candidates = collect_candidates(storage, codec)

        assert candidates == [
            EvictionCandidate(key="a", size=5, expiry=100),
            EvictionCandidate(key="b", size=3, expiry=MAX_TIMESTAMP),
        ]


class TestExpunge:
    """Test expiry-priority eviction."""

    def test_evicts_soonest_expiry_first(
        self, storage: MemoryStorage, codec: KeyCodec
    ) -> None:
        """Test only as many entries as needed are removed, soonest first."""
        write_entry(storage, codec, "late", "x" * 10, expiry.encode(300))
        write_entry(storage, codec, "early", "x" * 10, expiry.encode(100))
        write_entry(storage, codec, "middle", "x" * 10, expiry.encode(200))

        evicted = expunge(storage, codec, 15)

        assert evicted == ["early", "middle"]
        assert storage.get_item(codec.data_key("late")) == "x" * 10
        assert storage.get_item(codec.data_key("early")) is None
        assert storage.get_item(codec.expiry_key(codec.data_key("early"))) is None
        assert storage.length == 2

    def test_single_entry_covers_target(
        self, storage: MemoryStorage, codec: KeyCodec
    ) -> None:
        """Test eviction stops once the target is reached."""
        write_entry(storage, codec, "a", "x" * 10, expiry.encode(100))
        write_entry(storage, codec, "b", "x" * 10, expiry.encode(200))

        assert expunge(storage, codec, 10) == ["a"]

    def test_zero_target_evicts_nothing(
        self, storage: MemoryStorage, codec: KeyCodec
    ) -> None:
        """Test nothing is removed when no space is needed."""
        write_entry(storage, codec, "a", "x", expiry.encode(100))

        assert expunge(storage, codec, 0) == []
        assert storage.length == 2

    def test_runs_out_of_candidates(
        self, storage: MemoryStorage, codec: KeyCodec
    ) -> None:
        """Test everything goes when the target exceeds the cache contents."""
        storage.set_item("outside-cache", "keep me")
        write_entry(storage, codec, "a", "x", expiry.encode(100))
        write_entry(storage, codec, "b", "x", expiry.encode(200))

        assert expunge(storage, codec, 1000) == ["a", "b"]
        assert storage.length == 1
        assert storage.get_item("outside-cache") == "keep me"

    def test_entries_without_expiry_go_last(
        self, storage: MemoryStorage, codec: KeyCodec
    ) -> None:
        """Test a missing expiry record sorts as the maximum timestamp."""
        write_entry(storage, codec, "no-expiry", "x")
        write_entry(storage, codec, "default-ttl", "x", expiry.encode(1_700_000_000 + int(expiry.DEFAULT_TTL)))

        assert expunge(storage, codec, 2) == ["default-ttl", "no-expiry"]

    def test_ties_evict_later_enumerated_first(
        self, storage: MemoryStorage, codec: KeyCodec
    ) -> None:
        """Test equal expiries keep a deterministic order."""
        write_entry(storage, codec, "first", "x", expiry.encode(100))
        write_entry(storage, codec, "second", "x", expiry.encode(100))

        assert expunge(storage, codec, 1) == ["second"]

    def test_remove_entry_is_idempotent(
        self, storage: MemoryStorage, codec: KeyCodec
    ) -> None:
        """Test removing a missing entry is harmless."""
        write_entry(storage, codec, "a", "x", expiry.encode(100))

        remove_entry(storage, codec, "a")
        remove_entry(storage, codec, "a")

        assert storage.length == 0

    def test_logs_each_eviction(
        self,
        storage: MemoryStorage,
        codec: KeyCodec,
        cache_logs: pytest.LogCaptureFixture,
    ) -> None:
        """Test eviction diagnostics go to the supplied logger."""
        from offline_cache.logging import get_logger

        write_entry(storage, codec, "a", "x", expiry.encode(100))

        expunge(storage, codec, 1, logger=get_logger("tests.eviction"))

        messages = [record.getMessage() for record in cache_logs.records]
        assert "Expunged [a]" in messages
        assert any(message.startswith("Expunge took") for message in messages)
