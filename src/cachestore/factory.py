from __future__ import annotations

import logging
import typing as t

from .serialization import get_serializer
from .storage.base import BaseCache
from .storage.memory import InMemoryCache
from .utils.config import CacheConfig
from .utils.resilience import CircuitBreaker, CircuitBreakerConfig

_logger = logging.getLogger(__name__)


def build_cache(config: t.Optional[CacheConfig] = None, **overrides: t.Any) -> BaseCache:
    """Construct a cache from configuration.

    ``overrides`` are passed to the cache constructor as-is (e.g. ``clock``).
    """
    config = config or CacheConfig()
    store = config.store
    if store.type != "memory":
        raise ValueError(f"Unsupported store type: {store.type!r}")

    resilience = config.resilience
    if resilience.circuit_breaker_enabled:
        threshold = resilience.failure_threshold
    else:
        # a breaker that can never trip
        threshold = float("inf")  # type: ignore[assignment]
    breaker = CircuitBreaker(
        CircuitBreakerConfig(failure_threshold=threshold, reset_timeout_seconds=resilience.reset_timeout_seconds)
    )

    kwargs: t.Dict[str, t.Any] = dict(
        max_size=store.max_size,
        sweep_interval=store.sweep_interval,
        serializer=get_serializer(config.serializer.format),
        default_ttl=store.default_ttl_seconds,
        circuit_breaker=breaker,
        retry_attempts=resilience.retry_max_attempts,
        retry_backoff_ms=list(resilience.retry_backoff_ms),
    )
    kwargs.update(overrides)
    cache = InMemoryCache(**kwargs)
    _logger.info(
        "Cache initialized: type=%s max_size=%s default_ttl=%s serializer=%s",
        store.type,
        store.max_size,
        store.default_ttl_seconds,
        config.serializer.format,
    )
    return cache
