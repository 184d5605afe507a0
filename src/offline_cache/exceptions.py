"""
Exception hierarchy for the offline cache.

All exceptions inherit from CacheError, which carries optional context
for structured logging. The public cache operations never let these
escape: they are raised by storage backends and collaborators and
caught at the facade boundary.
"""

from __future__ import annotations

from typing import Any


class CacheError(Exception):
    """Base exception for all offline cache errors.

    Attributes:
        message: Human-readable error message.
        context: Optional structured context for logging/debugging.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class ConfigurationError(CacheError):
    """Raised when cache configuration is invalid.

    Examples:
        - Empty key prefix or expiry suffix
        - Unknown storage backend
    """

    pass


class SerializationError(CacheError):
    """Raised when a value cannot be serialized.

    Context should include:
        - key: The logical key being written
        - value_type: Type name of the rejected value
    """

    pass


class StoreError(CacheError):
    """Raised by storage backends for any failed primitive operation.

    Context should include:
        - operation: The storage operation (get_item, set_item, ...)
        - key: The physical key involved, if any
    """

    name = "StoreError"


class UnsupportedError(StoreError):
    """Raised when the underlying storage is unavailable."""

    name = "UnsupportedError"


class CapacityExceededError(StoreError):
    """Raised when a write would exceed the storage quota.

    Context should include:
        - quota: The configured quota in characters
        - used: Characters in use before the write
        - requested: Characters the write needed
    """

    name = "CapacityExceededError"


class QuotaExceededError(CapacityExceededError):
    """Quota error raised by the bundled storage backends."""

    name = "QuotaExceededError"

