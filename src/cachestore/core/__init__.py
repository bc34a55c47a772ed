"""Core types: errors, key rules and TTL/entry models."""

from .errors import CacheError, InvalidKeyError, NotSerializableError
from .keys import RESERVED_CHARACTERS, validate_key, validate_keys
from .models import TTL, At, CacheEntry, Duration, NoExpiry, coerce_ttl, resolve_ttl

__all__ = [
    # Errors
    "CacheError",
    "InvalidKeyError",
    "NotSerializableError",
    # Keys
    "RESERVED_CHARACTERS",
    "validate_key",
    "validate_keys",
    # Models
    "CacheEntry",
    "TTL",
    "NoExpiry",
    "Duration",
    "At",
    "coerce_ttl",
    "resolve_ttl",
]
