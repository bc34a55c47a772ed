"""Exceptions raised by the cache contract.

Only caller mistakes surface as exceptions. Backend failures are reported
through return values (``False`` or the caller's default) instead.
"""

from __future__ import annotations

import typing as t


class CacheError(Exception):
    """Base class for all errors raised by a cache.

    Attributes:
        message: Human-readable error message.
        context: Structured details for logging/debugging.
    """

    def __init__(self, message: str, context: t.Optional[t.Dict[str, t.Any]] = None) -> None:
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


class InvalidKeyError(CacheError, ValueError):
    """Raised when a key is not a legal cache key.

    Context includes ``key`` (the offending value) and ``reason``.
    """


class NotSerializableError(CacheError, TypeError):
    """Raised when a value cannot be encoded by the cache's serializer.

    Context includes ``key``, ``value_type`` and ``serializer``.
    """
