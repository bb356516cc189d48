from __future__ import annotations

"""Timestamp helpers: UTC clock and ISO-8601 conversion."""

from datetime import datetime, timezone
from typing import Any, Callable

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_iso(value: datetime) -> str:
    return ensure_utc(value).isoformat()


def parse_timestamp(value: Any) -> datetime:
    """Accept a datetime, an ISO-8601 string or epoch milliseconds.

    Epochs the platform cannot represent raise ValueError like any other
    unparseable value.
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(float(value) / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError) as e:
            raise ValueError(f"timestamp out of range: {value!r}") from e
    text = str(value).strip()
    # JavaScript's Date.toISOString() ends with "Z"
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))


def elapsed_ms(start: datetime, end: datetime) -> int:
    return int(round((end - start).total_seconds() * 1000))
