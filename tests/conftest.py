"""
Pytest configuration and fixtures for offline cache tests.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Generator
from unittest.mock import patch

import pytest

from offline_cache.cache import OfflineCache, clear_cache_instance
from offline_cache.clock import ManualClock
from offline_cache.config import clear_settings_cache
from offline_cache.keys import KeyCodec
from offline_cache.logging import ROOT_LOGGER_NAME
from offline_cache.storage import MemoryStorage


class VendorQuotaError(Exception):
    """Quota error identified only by its vendor name."""

    def __init__(self, name: str = "NS_ERROR_DOM_QUOTA_REACHED") -> None:
        super().__init__("quota reached")
        self.name = name


class ScriptedStorage(MemoryStorage):
    """MemoryStorage that raises queued errors from set_item.

    Errors are only raised for keys accepted by `fail_keys`.
    """

    def __init__(self, quota: int | None = None) -> None:
        super().__init__(quota=quota)
        self.pending_errors: list[BaseException] = []
        self.fail_keys: Callable[[str], bool] = lambda key: True
        self.set_calls: list[str] = []

    def set_item(self, key: str, value: str) -> None:
        self.set_calls.append(key)
        if self.pending_errors and self.fail_keys(key):
            raise self.pending_errors.pop(0)
        super().set_item(key, value)


def write_entry(
    storage: MemoryStorage,
    codec: KeyCodec,
    key: str,
    value: str,
    expiry_text: str | None = None,
) -> None:
    """Write raw data (and optional expiry) records, bypassing the cache."""
    storage.set_item(codec.data_key(key), value)
    if expiry_text is not None:
        storage.set_item(codec.expiry_key(codec.data_key(key)), expiry_text)


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test outputs."""
    return tmp_path


@pytest.fixture
def clock() -> ManualClock:
    """Provide a clock that only moves when advanced."""
    return ManualClock(start=1_700_000_000)


@pytest.fixture
def codec() -> KeyCodec:
    """Provide the default key codec."""
    return KeyCodec()


@pytest.fixture
def storage() -> MemoryStorage:
    """Provide unbounded in-memory storage."""
    return MemoryStorage()


@pytest.fixture
def cache(storage: MemoryStorage, clock: ManualClock) -> OfflineCache:
    """Provide a cache over unbounded memory storage."""
    return OfflineCache(storage, clock=clock)


@pytest.fixture
def scripted_storage() -> ScriptedStorage:
    """Provide storage whose writes can be made to fail."""
    return ScriptedStorage()


@pytest.fixture
def scripted_cache(scripted_storage: ScriptedStorage, clock: ManualClock) -> OfflineCache:
    """Provide a cache over scripted storage, already probed for support."""
    cache = OfflineCache(scripted_storage, clock=clock, warnings=True)
    assert cache.supported()
    return cache


@pytest.fixture
def cache_logs(caplog: pytest.LogCaptureFixture) -> Generator[pytest.LogCaptureFixture, None, None]:
    """Capture records from the package logger, which does not propagate."""
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.addHandler(caplog.handler)
    caplog.set_level(logging.DEBUG, logger=ROOT_LOGGER_NAME)
    yield caplog
    package_logger.removeHandler(caplog.handler)


@pytest.fixture
def mock_env_vars() -> Generator[dict[str, str], None, None]:
    """Provide mock environment variables for testing."""
    env_vars = {
        "CACHE_BACKEND": "memory",
        "CACHE_QUOTA_CHARS": "10000",
        "CACHE_WARNINGS": "true",
        "LOG_LEVEL": "DEBUG",
    }

    with patch.dict(os.environ, env_vars, clear=False):
        clear_settings_cache()
        clear_cache_instance()
        yield env_vars


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Automatically reset settings and the shared cache around each test."""
    clear_settings_cache()
    clear_cache_instance()
    yield
    clear_settings_cache()
    clear_cache_instance()
