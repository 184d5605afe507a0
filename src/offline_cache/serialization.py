"""
Value serialization for cache records.

Storage only holds strings, so values go through a Serializer on the way
in and out. JsonSerializer uses orjson. PassthroughSerializer stands in
when no serializer is available: only str values can be stored and they
are read back unchanged.
"""

from __future__ import annotations

from typing import Any, Protocol

import orjson

from offline_cache.exceptions import SerializationError


class Serializer(Protocol):
    """Stringify/parse pair used by the cache."""

    available: bool

    def dumps(self, value: Any) -> str: ...

    def loads(self, text: str) -> Any: ...


class JsonSerializer:
    """orjson-backed serializer.

    Circular references, non-string dict keys and unsupported types
    raise SerializationError.
    """

    available = True

    def __init__(self, option: int | None = None) -> None:
        self._option = option

    def dumps(self, value: Any) -> str:
        try:
            return orjson.dumps(value, option=self._option).decode("utf-8")
        except orjson.JSONEncodeError as e:
            raise SerializationError(
                "Value is not serializable",
                context={"value_type": type(value).__name__, "reason": str(e)},
            ) from e

    def loads(self, text: str) -> Any:
        try:
            return orjson.loads(text)
        except orjson.JSONDecodeError as e:
            raise SerializationError("Stored text is not valid JSON") from e


class PassthroughSerializer:
    """Serializer used when values cannot be structured."""

    available = False

    def dumps(self, value: Any) -> str:
        if not isinstance(value, str):
            raise SerializationError(
                "Only strings can be stored without a serializer",
                context={"value_type": type(value).__name__},
            )
        return value

    def loads(self, text: str) -> Any:
        return text
