"""Utility module for configuration and resilience patterns."""

from .config import CacheConfig, ResilienceConfig, SerializerConfig, StoreConfig
from .resilience import CircuitBreaker, CircuitBreakerConfig, CircuitOpenError, CircuitState, with_retries

__all__ = [
    "CacheConfig",
    "StoreConfig",
    "SerializerConfig",
    "ResilienceConfig",
    "CircuitBreaker",
    "CircuitBreakerConfig",
    "CircuitOpenError",
    "CircuitState",
    "with_retries",
]
