from .base import BaseCache, Cache, Container
from .memory import InMemoryCache

__all__ = ["Container", "Cache", "BaseCache", "InMemoryCache"]
