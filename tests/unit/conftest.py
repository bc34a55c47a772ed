"""Shared fixtures and fakes for unit tests."""

from __future__ import annotations

import typing as t

import pytest

from cachestore.core.models import CacheEntry
from cachestore.storage.memory import InMemoryCache
from cachestore.utils.resilience import CircuitBreaker, CircuitBreakerConfig


class FakeClock:
    """Manually advanced clock returning POSIX-like seconds."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FlakyInMemoryCache(InMemoryCache):
    """In-memory cache whose primitives raise while ``failing`` is set.

    ``fail_after`` lets a given number of ``_store`` calls succeed first and
    ``fail_remove_keys`` makes ``_remove`` fail for specific keys only.
    """

    def __init__(self, **kwargs: t.Any) -> None:
        super().__init__(**kwargs)
        self.failing = False
        self.fail_after: t.Optional[int] = None
        self.store_calls = 0
        self.fail_remove_keys: t.Set[str] = set()

    def _check(self) -> None:
        if self.failing:
            raise ConnectionError("backend unavailable")

    def _load(self, key: str) -> t.Optional[CacheEntry]:
        self._check()
        return super()._load(key)

    def _store(self, entry: CacheEntry) -> None:
        self.store_calls += 1
        if self.fail_after is not None and self.store_calls > self.fail_after:
            raise ConnectionError("backend unavailable")
        self._check()
        super()._store(entry)

    def _remove(self, key: str) -> None:
        self._check()
        if key in self.fail_remove_keys:
            raise ConnectionError(f"cannot remove {key}")
        super()._remove(key)

    def _remove_all(self) -> None:
        self._check()
        super()._remove_all()

    def _expired_keys(self, now: float) -> t.List[str]:
        self._check()
        return super()._expired_keys(now)


@pytest.fixture
def clock():
    """Fake clock for deterministic TTL tests."""
    return FakeClock()


@pytest.fixture
def cache(clock):
    """Unbounded in-memory cache driven by the fake clock."""
    return InMemoryCache(clock=clock)


@pytest.fixture
def flaky_cache(clock):
    """Cache with a switchable failing backend and a breaker that never trips."""
    breaker = CircuitBreaker(CircuitBreakerConfig(failure_threshold=1_000_000))
    return FlakyInMemoryCache(clock=clock, circuit_breaker=breaker)


@pytest.fixture
def make_flaky_cache(clock):
    """Factory for flaky caches with custom retry settings."""

    def factory(**kwargs: t.Any) -> FlakyInMemoryCache:
        kwargs.setdefault("clock", clock)
        kwargs.setdefault("circuit_breaker", CircuitBreaker(CircuitBreakerConfig(failure_threshold=1_000_000)))
        return FlakyInMemoryCache(**kwargs)

    return factory
