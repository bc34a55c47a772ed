from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple


@dataclass
class Counter:
    name: str
    help: str
    values: Dict[Tuple, float] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def inc(self, value: float = 1.0, **labels: Any) -> None:
        key = tuple(sorted(labels.items()))
        with self._lock:
            self.values[key] = self.values.get(key, 0.0) + value

    def get(self, **labels: Any) -> float:
        return self.values.get(tuple(sorted(labels.items())), 0.0)

    def total(self) -> float:
        return sum(self.values.values())


@dataclass
class Histogram:
    name: str
    help: str
    buckets: List[float]
    counts: Dict[Tuple, List[int]] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def observe(self, val: float, **labels: Any) -> None:
        key = tuple(sorted(labels.items()))
        with self._lock:
            if key not in self.counts:
                # last slot counts observations above the largest bucket
                self.counts[key] = [0 for _ in range(len(self.buckets) + 1)]
            for i, b in enumerate(self.buckets):
                if val <= b:
                    self.counts[key][i] += 1
                    break
            else:
                self.counts[key][-1] += 1

    def count(self, **labels: Any) -> int:
        return sum(self.counts.get(tuple(sorted(labels.items())), []))


@dataclass
class CacheMetrics:
    """Per-cache instruments."""

    hits: Counter = field(default_factory=lambda: Counter("cache_hits_total", "Reads served from a live entry"))
    misses: Counter = field(default_factory=lambda: Counter("cache_misses_total", "Reads that fell back to the default"))
    expirations: Counter = field(
        default_factory=lambda: Counter("cache_expirations_total", "Expired entries removed lazily or by sweep")
    )
    backend_failures: Counter = field(
        default_factory=lambda: Counter("cache_backend_failures_total", "Operations reported as failed by the backend")
    )
    operation_latency_seconds: Histogram = field(
        default_factory=lambda: Histogram(
            "cache_operation_latency_seconds",
            "Cache operation latency",
            buckets=[0.00001, 0.0001, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
        )
    )

    def hit_ratio(self) -> float:
        hits = self.hits.total()
        lookups = hits + self.misses.total()
        return hits / lookups if lookups else 0.0
