"""cachestore

A key-value cache contract with optional time-to-live semantics and an
in-memory reference implementation of it.
"""

from .aio import AsyncCache
from .core.errors import CacheError, InvalidKeyError, NotSerializableError
from .core.models import TTL, At, Duration, NoExpiry
from .factory import build_cache
from .serialization import JsonSerializer, PickleSerializer, Serializer
from .storage import BaseCache, Cache, Container, InMemoryCache
from .utils.config import CacheConfig

__all__ = [
    "Cache",
    "Container",
    "BaseCache",
    "InMemoryCache",
    "AsyncCache",
    "build_cache",
    "CacheConfig",
    "CacheError",
    "InvalidKeyError",
    "NotSerializableError",
    "TTL",
    "NoExpiry",
    "Duration",
    "At",
    "Serializer",
    "PickleSerializer",
    "JsonSerializer",
]

__version__ = "0.1.0"
