from __future__ import annotations

import datetime as dt
import math
import typing as t
from dataclasses import dataclass


def _require_finite(field: str, value: float) -> None:
    # NaN compares false against every clock reading and would never expire
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{field} must be a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise ValueError(f"{field} must be finite, got {value!r}")


@dataclass(frozen=True)
class NoExpiry:
    """The entry never expires."""


@dataclass(frozen=True)
class Duration:
    """Expire ``seconds`` after the write."""

    seconds: float

    def __post_init__(self) -> None:
        _require_finite("seconds", self.seconds)

    @classmethod
    def from_timedelta(cls, delta: dt.timedelta) -> "Duration":
        return cls(delta.total_seconds())


@dataclass(frozen=True)
class At:
    """Expire at an absolute POSIX timestamp."""

    timestamp: float

    def __post_init__(self) -> None:
        _require_finite("timestamp", self.timestamp)

    @classmethod
    def from_datetime(cls, when: dt.datetime) -> "At":
        # Naive datetimes are interpreted as local time, like datetime.timestamp().
        return cls(when.timestamp())


TTL = t.Union[NoExpiry, Duration, At]

# Everything callers may pass as ``ttl``.
TTLLike = t.Union[None, int, float, dt.timedelta, dt.datetime, NoExpiry, Duration, At]


def coerce_ttl(ttl: TTLLike, default: t.Optional[TTL] = None) -> TTL:
    """Map the accepted ``ttl`` shapes onto the TTL variant.

    ``None`` selects ``default`` (or NoExpiry when there is none).
    """
    if ttl is None:
        return default if default is not None else NoExpiry()
    if isinstance(ttl, (NoExpiry, Duration, At)):
        return ttl
    # bool is an int subclass; ``set(key, value, True)`` is always a mistake
    if isinstance(ttl, bool):
        raise TypeError("ttl must not be a bool")
    if isinstance(ttl, (int, float)):
        return Duration(float(ttl))
    if isinstance(ttl, dt.timedelta):
        return Duration.from_timedelta(ttl)
    if isinstance(ttl, dt.datetime):
        return At.from_datetime(ttl)
    raise TypeError(f"Unsupported ttl type: {type(ttl).__name__}")


def resolve_ttl(ttl: TTL, now: float) -> t.Optional[float]:
    """Return the absolute expiration timestamp, or None for no expiry."""
    if isinstance(ttl, NoExpiry):
        return None
    if isinstance(ttl, Duration):
        return now + ttl.seconds
    return ttl.timestamp


@dataclass
class CacheEntry:
    key: str
    payload: t.Any
    expires_at: t.Optional[float] = None

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and self.expires_at <= now
