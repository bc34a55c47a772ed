"""Value encoders.

The cache stores encoded payloads, never the caller's live objects, so every
cached value has to round-trip through a serializer.
"""

from __future__ import annotations

import json
import pickle
import typing as t
from abc import ABC, abstractmethod


class Serializer(ABC):
    name: str = "abstract"

    @abstractmethod
    def dumps(self, value: t.Any) -> t.Any:  # pragma: no cover - interface
        """Encode ``value``; raise any exception if it cannot be encoded."""
        raise NotImplementedError

    @abstractmethod
    def loads(self, payload: t.Any) -> t.Any:  # pragma: no cover - interface
        raise NotImplementedError


class PickleSerializer(Serializer):
    """Accepts any picklable object (rejects locks, sockets, generators, lambdas...)."""

    name = "pickle"

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL) -> None:
        self._protocol = protocol

    def dumps(self, value: t.Any) -> bytes:
        return pickle.dumps(value, protocol=self._protocol)

    def loads(self, payload: bytes) -> t.Any:
        return pickle.loads(payload)


class JsonSerializer(Serializer):
    """JSON payloads. Tuples come back as lists; NaN/Infinity are rejected."""

    name = "json"

    def dumps(self, value: t.Any) -> str:
        return json.dumps(value, allow_nan=False, separators=(",", ":"))

    def loads(self, payload: str) -> t.Any:
        return json.loads(payload)


_SERIALIZERS: t.Dict[str, t.Type[Serializer]] = {
    PickleSerializer.name: PickleSerializer,
    JsonSerializer.name: JsonSerializer,
}


def get_serializer(name: str) -> Serializer:
    try:
        return _SERIALIZERS[name]()
    except KeyError:
        raise ValueError(f"Unknown serializer format: {name!r}") from None
