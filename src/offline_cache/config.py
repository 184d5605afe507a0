"""
Configuration management using pydantic-settings.

Loads configuration from environment variables and .env files.
Validates the key namespace and quota and provides typed access to
settings.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from offline_cache.exceptions import ConfigurationError
from offline_cache.keys import DEFAULT_EXPIRY_SUFFIX, DEFAULT_KEY_PREFIX
from offline_cache.storage import MemoryStorage, SQLiteStorage, Storage


class Settings(BaseSettings):
    """Cache settings loaded from environment variables.

    Optional:
        CACHE_BACKEND: Storage backend (memory or sqlite)
        CACHE_DB_PATH: Database file for the sqlite backend
        CACHE_QUOTA_CHARS: Storage quota in characters (unbounded if unset)
        CACHE_KEY_PREFIX: Namespace marker prepended to every cache key
        CACHE_EXPIRY_SUFFIX: Suffix marking expiry records
        CACHE_WARNINGS: Log internal cache failures
        LOG_LEVEL: Logging level
        LOG_FILE: JSON Lines log file
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    CACHE_BACKEND: Literal["memory", "sqlite"] = Field(
        default="memory", description="Storage backend"
    )
    CACHE_DB_PATH: Path = Field(
        default=Path(".cache/offline_cache.db"),
        description="Database file for the sqlite backend",
    )
    CACHE_QUOTA_CHARS: int | None = Field(
        default=None, ge=1, description="Storage quota in characters"
    )

    # Key namespace
    CACHE_KEY_PREFIX: str = Field(
        default=DEFAULT_KEY_PREFIX, description="Namespace marker for cache keys"
    )
    CACHE_EXPIRY_SUFFIX: str = Field(
        default=DEFAULT_EXPIRY_SUFFIX, description="Suffix marking expiry records"
    )

    # Logging
    CACHE_WARNINGS: bool = Field(default=False, description="Log internal failures")
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    LOG_FILE: Path | None = Field(default=None, description="JSON Lines log file")

    @field_validator("CACHE_KEY_PREFIX", "CACHE_EXPIRY_SUFFIX")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        """Key prefix and expiry suffix must be non-empty."""
        if not v:
            raise ValueError("Key prefix and expiry suffix must not be empty")
        return v

    @model_validator(mode="after")
    def validate_suffix_distinct(self) -> Settings:
        """Ensure expiry records cannot be mistaken for namespaced data keys."""
        if self.CACHE_KEY_PREFIX in self.CACHE_EXPIRY_SUFFIX:
            raise ValueError("CACHE_EXPIRY_SUFFIX must not contain CACHE_KEY_PREFIX")
        return self

    def ensure_directories(self) -> None:
        """Create the database directory if the sqlite backend is used."""
        if self.CACHE_BACKEND == "sqlite":
            self.CACHE_DB_PATH.parent.mkdir(parents=True, exist_ok=True)

    def display(self) -> dict[str, str | int | bool | None]:
        """Return settings as a flat dict for display."""
        return {
            "CACHE_BACKEND": self.CACHE_BACKEND,
            "CACHE_DB_PATH": str(self.CACHE_DB_PATH),
            "CACHE_QUOTA_CHARS": self.CACHE_QUOTA_CHARS,
            "CACHE_KEY_PREFIX": self.CACHE_KEY_PREFIX,
            "CACHE_EXPIRY_SUFFIX": self.CACHE_EXPIRY_SUFFIX,
            "CACHE_WARNINGS": self.CACHE_WARNINGS,
            "LOG_LEVEL": self.LOG_LEVEL,
            "LOG_FILE": str(self.LOG_FILE) if self.LOG_FILE else None,
        }


def build_storage(settings: Settings) -> Storage:
    """Construct the storage backend named by the settings.

    Raises:
        ConfigurationError: If the backend is unknown.
    """
    if settings.CACHE_BACKEND == "memory":
        return MemoryStorage(quota=settings.CACHE_QUOTA_CHARS)
    if settings.CACHE_BACKEND == "sqlite":
        settings.ensure_directories()
        return SQLiteStorage(settings.CACHE_DB_PATH, quota=settings.CACHE_QUOTA_CHARS)
    raise ConfigurationError(
        "Unknown storage backend", context={"backend": settings.CACHE_BACKEND}
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If settings are invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
