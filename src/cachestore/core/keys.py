from __future__ import annotations

import typing as t

from .errors import InvalidKeyError

RESERVED_CHARACTERS = frozenset("{}()/\\@:")


def _reject(key: t.Any, reason: str) -> InvalidKeyError:
    return InvalidKeyError(f"Illegal cache key: {reason}", {"key": key, "reason": reason})


def validate_key(key: t.Any) -> str:
    """Return ``key`` unchanged if it is legal, else raise InvalidKeyError.

    A legal key is a non-empty ``str`` free of whitespace, control characters
    and the reserved characters ``{}()/\\@:``.
    """
    if not isinstance(key, str):
        raise _reject(key, f"expected str, got {type(key).__name__}")
    if not key:
        raise _reject(key, "empty key")
    for ch in key:
        if ch in RESERVED_CHARACTERS:
            raise _reject(key, f"reserved character {ch!r}")
        if ch.isspace() or not ch.isprintable():
            raise _reject(key, f"whitespace or control character {ch!r}")
    return key


def validate_keys(keys: t.Iterable[t.Any]) -> t.List[str]:
    """Materialize ``keys`` and validate every one before returning.

    A bare string is rejected rather than iterated character by character.
    """
    if isinstance(keys, (str, bytes)):
        raise _reject(keys, "expected an iterable of keys, got a single string")
    try:
        iterator = iter(keys)
    except TypeError:
        raise _reject(keys, f"expected an iterable of keys, got {type(keys).__name__}") from None
    materialized = list(iterator)
    for key in materialized:
        validate_key(key)
    return materialized
