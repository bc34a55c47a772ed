from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class StoreConfig:
    type: str = "memory"  # memory only; other drivers plug in behind the Cache contract
    max_size: Optional[int] = None
    default_ttl_seconds: Optional[float] = None
    sweep_interval: int = 0


@dataclass
class SerializerConfig:
    format: str = "pickle"  # pickle | json


@dataclass
class ResilienceConfig:
    circuit_breaker_enabled: bool = True
    failure_threshold: int = 5
    reset_timeout_seconds: float = 30.0
    retry_max_attempts: int = 1
    retry_backoff_ms: List[int] = dataclasses.field(default_factory=lambda: [10, 50, 100])


@dataclass
class CacheConfig:
    store: StoreConfig = dataclasses.field(default_factory=StoreConfig)
    serializer: SerializerConfig = dataclasses.field(default_factory=SerializerConfig)
    resilience: ResilienceConfig = dataclasses.field(default_factory=ResilienceConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CacheConfig":
        def build(dc_cls, key):
            values = data.get(key, {})
            return dc_cls(**values)

        return cls(
            store=build(StoreConfig, "store"),
            serializer=build(SerializerConfig, "serializer"),
            resilience=build(ResilienceConfig, "resilience"),
        )
