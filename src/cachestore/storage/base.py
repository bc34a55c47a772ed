from __future__ import annotations

import logging
import threading
import time
import typing as t
from abc import ABC, abstractmethod
from collections.abc import Mapping
from contextlib import contextmanager

from ..core.errors import NotSerializableError
from ..core.keys import validate_key, validate_keys
from ..core.models import TTL, CacheEntry, NoExpiry, TTLLike, coerce_ttl, resolve_ttl
from ..monitoring.metrics import CacheMetrics
from ..serialization import PickleSerializer, Serializer
from ..utils.resilience import CircuitBreaker, CircuitBreakerConfig, with_retries

_logger = logging.getLogger(__name__)

_MISSING = object()

Pairs = t.Union[t.Mapping[str, t.Any], t.Iterable[t.Tuple[str, t.Any]]]


class Container(ABC):
    """Read access to a keyed collection."""

    @abstractmethod
    def get(self, key: str, default: t.Any = None) -> t.Any:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def has(self, key: str) -> bool:  # pragma: no cover - interface
        raise NotImplementedError


class Cache(Container):
    """Basic reading, writing and deleting of single or multiple cache entries.

    Illegal keys raise InvalidKeyError and values the cache cannot encode raise
    NotSerializableError. Any other failure is reported by returning ``False``
    (or the default, for reads) and never raises.

    ``ttl`` accepts ``None`` (the cache's default, if any), seconds as an
    ``int``/``float``, a ``datetime.timedelta``, an absolute
    ``datetime.datetime``, or one of NoExpiry / Duration / At.
    """

    @abstractmethod
    def clear(self) -> bool:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> bool:  # pragma: no cover - interface
        """Remove ``key``. Succeeds whether or not the key existed."""
        raise NotImplementedError

    @abstractmethod
    def delete_multiple(self, keys: t.Iterable[str]) -> bool:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def get_multiple(
        self, keys: t.Iterable[str], default: t.Any = None
    ) -> t.List[t.Tuple[str, t.Any]]:  # pragma: no cover - interface
        """Return ``(key, value)`` pairs in input order; missing or stale keys get ``default``.

        Every key is validated before any lookup.
        """
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: t.Any, ttl: TTLLike = None) -> bool:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def set_multiple(self, values: Pairs, ttl: TTLLike = None) -> bool:  # pragma: no cover - interface
        """Store every pair with one shared ``ttl``.

        All keys and values are validated before anything is written.
        """
        raise NotImplementedError


class BaseCache(Cache):
    """Contract logic shared by concrete caches.

    Subclasses supply the storage primitives (``_load``, ``_store``,
    ``_remove``, ``_remove_all``, ``_expired_keys``). Primitives are always
    called with ``self._lock`` held and may raise on backend failure.

    Each operation runs as one locked attempt. A failed attempt is retried
    as a whole, with the lock released during the backoff sleep, inside the
    circuit breaker; the final failure becomes a ``False``/default result.
    """

    def __init__(
        self,
        serializer: t.Optional[Serializer] = None,
        default_ttl: TTLLike = None,
        clock: t.Callable[[], float] = time.time,
        circuit_breaker: t.Optional[CircuitBreaker] = None,
        retry_attempts: int = 1,
        retry_backoff_ms: t.Optional[t.List[int]] = None,
        metrics: t.Optional[CacheMetrics] = None,
    ) -> None:
        self._serializer = serializer or PickleSerializer()
        self._default_ttl: TTL = coerce_ttl(default_ttl, NoExpiry())
        self._clock = clock
        self._breaker = circuit_breaker or CircuitBreaker(CircuitBreakerConfig())
        self._retry_attempts = retry_attempts
        self._retry_backoff_ms = retry_backoff_ms or [10, 50, 100]
        self._lock = threading.RLock()
        self.metrics = metrics or CacheMetrics()

    # -- storage primitives -------------------------------------------------

    @abstractmethod
    def _load(self, key: str) -> t.Optional[CacheEntry]:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def _store(self, entry: CacheEntry) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def _remove(self, key: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def _remove_all(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def _expired_keys(self, now: float) -> t.List[str]:  # pragma: no cover - interface
        raise NotImplementedError

    def _requeue_expired(self, keys: t.List[str]) -> None:
        """Give back keys taken from ``_expired_keys`` that were not removed."""

    # -- helpers ------------------------------------------------------------

    def _call(self, fn: t.Callable[[], t.Any]) -> t.Any:
        """Run ``fn`` under the cache lock, retrying with the lock released between attempts."""

        def attempt() -> t.Any:
            with self._lock:
                return fn()

        return self._breaker.run(lambda: with_retries(attempt, self._retry_attempts, self._retry_backoff_ms))

    def _backend_failed(self, op: str, exc: Exception, key: t.Optional[str] = None) -> None:
        self.metrics.backend_failures.inc(op=op)
        _logger.warning("Cache %s failed for key=%r: %s", op, key, exc, exc_info=exc)

    @contextmanager
    def _timed(self, op: str) -> t.Iterator[None]:
        started = time.perf_counter()
        try:
            yield
        finally:
            self.metrics.operation_latency_seconds.observe(time.perf_counter() - started, op=op)

    def _encode(self, key: str, value: t.Any) -> t.Any:
        try:
            return self._serializer.dumps(value)
        except Exception as exc:
            raise NotSerializableError(
                f"Value for key {key!r} is not serializable",
                {"key": key, "value_type": type(value).__name__, "serializer": self._serializer.name},
            ) from exc

    def _expiry_for(self, ttl: TTLLike) -> t.Optional[float]:
        return resolve_ttl(coerce_ttl(ttl, self._default_ttl), self._clock())

    def _record(self, value: t.Any) -> None:
        if value is _MISSING:
            self.metrics.misses.inc()
        else:
            self.metrics.hits.inc()

    def _lookup(self, key: str) -> t.Any:
        """Return the decoded live value for ``key`` or ``_MISSING``. Lock must be held; may raise."""
        entry = self._load(key)
        if entry is None:
            return _MISSING
        if entry.is_expired(self._clock()):
            _logger.debug("Entry expired, removing key=%r", key)
            self._remove(key)
            self.metrics.expirations.inc()
            return _MISSING
        try:
            return self._serializer.loads(entry.payload)
        except Exception as exc:
            self._backend_failed("decode", exc, key)
        self._remove(key)
        return _MISSING

    def _write(self, key: str, payload: t.Any, expires_at: t.Optional[float]) -> None:
        """Store or, for an already-expired TTL, remove. Lock must be held; may raise."""
        if expires_at is not None and expires_at <= self._clock():
            self._remove(key)
            return
        self._store(CacheEntry(key=key, payload=payload, expires_at=expires_at))

    @staticmethod
    def _pairs(values: Pairs) -> t.List[t.Tuple[t.Any, t.Any]]:
        if isinstance(values, Mapping):
            return list(values.items())
        pairs = []
        for item in values:
            if not isinstance(item, (tuple, list)) or len(item) != 2:
                raise TypeError(f"Expected (key, value) pairs, got {item!r}")
            pairs.append((item[0], item[1]))
        return pairs

    # -- contract -------------------------------------------------------------

    def get(self, key: str, default: t.Any = None) -> t.Any:
        validate_key(key)
        with self._timed("get"):
            try:
                value = self._call(lambda: self._lookup(key))
            except Exception as exc:
                self._backend_failed("get", exc, key)
                return default
        self._record(value)
        return default if value is _MISSING else value

    def has(self, key: str) -> bool:
        validate_key(key)
        with self._timed("has"):
            try:
                value = self._call(lambda: self._lookup(key))
            except Exception as exc:
                self._backend_failed("has", exc, key)
                return False
        self._record(value)
        return value is not _MISSING

    def get_multiple(self, keys: t.Iterable[str], default: t.Any = None) -> t.List[t.Tuple[str, t.Any]]:
        checked = validate_keys(keys)
        with self._timed("get_multiple"):
            try:
                # one attempt reads every key, so the result is a single snapshot
                values = self._call(lambda: [self._lookup(key) for key in checked])
            except Exception as exc:
                self._backend_failed("get_multiple", exc)
                return [(key, default) for key in checked]
        for value in values:
            self._record(value)
        return [(key, default if value is _MISSING else value) for key, value in zip(checked, values)]

    def set(self, key: str, value: t.Any, ttl: TTLLike = None) -> bool:
        validate_key(key)
        payload = self._encode(key, value)
        expires_at = self._expiry_for(ttl)
        with self._timed("set"):
            try:
                self._call(lambda: self._write(key, payload, expires_at))
            except Exception as exc:
                self._backend_failed("set", exc, key)
                return False
        return True

    def set_multiple(self, values: Pairs, ttl: TTLLike = None) -> bool:
        pairs = self._pairs(values)
        validate_keys(key for key, _ in pairs)
        encoded = [(key, self._encode(key, value)) for key, value in pairs]
        expires_at = self._expiry_for(ttl)

        def write_all() -> None:
            for key, payload in encoded:
                self._write(key, payload, expires_at)

        with self._timed("set_multiple"):
            try:
                self._call(write_all)
            except Exception as exc:
                # entries written before the failure are kept
                self._backend_failed("set_multiple", exc)
                return False
        return True

    def delete(self, key: str) -> bool:
        validate_key(key)
        with self._timed("delete"):
            try:
                self._call(lambda: self._remove(key))
            except Exception as exc:
                self._backend_failed("delete", exc, key)
                return False
        return True

    def delete_multiple(self, keys: t.Iterable[str]) -> bool:
        checked = validate_keys(keys)

        def remove_all() -> None:
            first_error: t.Optional[Exception] = None
            for key in checked:
                try:
                    self._remove(key)
                except Exception as exc:
                    first_error = first_error or exc
            if first_error is not None:
                raise first_error

        with self._timed("delete_multiple"):
            try:
                self._call(remove_all)
            except Exception as exc:
                self._backend_failed("delete_multiple", exc)
                return False
        return True

    def clear(self) -> bool:
        with self._timed("clear"):
            try:
                self._call(self._remove_all)
            except Exception as exc:
                self._backend_failed("clear", exc)
                return False
        return True

    def purge_expired(self) -> int:
        """Remove every expired entry now and return how many were removed."""

        def purge() -> int:
            expired = self._expired_keys(self._clock())
            for index, key in enumerate(expired):
                try:
                    self._remove(key)
                except Exception:
                    self._requeue_expired(expired[index:])
                    raise
            return len(expired)

        with self._timed("purge_expired"):
            try:
                removed = self._call(purge)
            except Exception as exc:
                self._backend_failed("purge_expired", exc)
                return 0
        if removed:
            self.metrics.expirations.inc(removed)
            _logger.debug("Purged %d expired entries", removed)
        return removed
