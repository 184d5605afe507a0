"""
Expiry timestamp encoding.

Expiry records hold a seconds-since-epoch timestamp as base-36 text, which
keeps the stored strings short. A missing or unreadable record decodes to
MAX_TIMESTAMP: the entry never expires under normal comparison but can
still be evicted.

When no TTL is given the entry expires DEFAULT_TTL seconds from now. Using
half the range instead of MAX_TIMESTAMP keeps such entries ordered by
insertion time, so older ones are evicted first.
"""

from __future__ import annotations

import math
import string
from typing import Any

EXPIRY_RADIX = 36

# Largest ECMAScript date (epoch + 1e8 days), in seconds; kept for interop
MAX_TIMESTAMP = 8_640_000_000_000

DEFAULT_TTL = MAX_TIMESTAMP / 2

_DIGITS = string.digits + string.ascii_lowercase


def encode(timestamp: int) -> str:
    """Encode an integer timestamp as lowercase base-36 text."""
    timestamp = int(timestamp)
    if timestamp == 0:
        return "0"

    sign = "-" if timestamp < 0 else ""
    remaining = abs(timestamp)
    digits: list[str] = []
    while remaining:
        remaining, digit = divmod(remaining, EXPIRY_RADIX)
        digits.append(_DIGITS[digit])
    return sign + "".join(reversed(digits))


def decode(text: str | None) -> int:
    """Decode base-36 text into a timestamp.

    Parsing stops at the first character that is not a base-36 digit,
    so trailing garbage is ignored.

    Args:
        text: Stored expiry text, or None when there is no record.

    Returns:
        The decoded timestamp, or MAX_TIMESTAMP if the text is absent,
        empty or has no leading digits.
    """
    if not text:
        return MAX_TIMESTAMP

    body = text.strip().lower()
    sign = 1
    if body[:1] in ("-", "+"):
        sign = -1 if body[0] == "-" else 1
        body = body[1:]

    end = 0
    while end < len(body) and body[end] in _DIGITS:
        end += 1

    if end == 0:
        return MAX_TIMESTAMP

    return sign * int(body[:end], EXPIRY_RADIX)


def effective_ttl(seconds: Any) -> float:
    """TTL to apply for a requested number of seconds.

    Returns:
        The requested TTL when it is a finite number, otherwise DEFAULT_TTL.
    """
    if seconds is None:
        return DEFAULT_TTL
    try:
        value = float(seconds)
    except OverflowError:
        # Too large for a float: effectively infinite
        return DEFAULT_TTL
    except (TypeError, ValueError):
        return DEFAULT_TTL
    return value if math.isfinite(value) else DEFAULT_TTL
