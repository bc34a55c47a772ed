from __future__ import annotations

import heapq
import logging
import typing as t
from collections import OrderedDict

from ..core.errors import InvalidKeyError
from ..core.models import CacheEntry
from .base import BaseCache

_logger = logging.getLogger(__name__)


class InMemoryCache(BaseCache):
    """Process-local cache with lazy TTL expiration and an optional LRU bound.

    Entries live in an insertion/recency ordered mapping. A min-heap of
    ``(expires_at, key)`` indexes expiration times for ``purge_expired``;
    heap items whose key has since been overwritten or removed are stale and
    skipped. Reads never depend on the heap.

    Args:
        max_size: Evict the least recently used entry once a write exceeds
            this many entries. ``None`` means unbounded.
        sweep_interval: If positive, purge expired entries every
            ``sweep_interval`` writes in addition to lazy expiration.
        **kwargs: Forwarded to BaseCache (serializer, default_ttl, clock, ...).
    """

    def __init__(
        self,
        max_size: t.Optional[int] = None,
        sweep_interval: int = 0,
        **kwargs: t.Any,
    ) -> None:
        if max_size is not None and max_size < 1:
            raise ValueError("max_size must be a positive integer or None")
        if sweep_interval < 0:
            raise ValueError("sweep_interval must not be negative")
        super().__init__(**kwargs)
        self._store_map: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._expiry_heap: t.List[t.Tuple[float, str]] = []
        self._max_size = max_size
        self._sweep_interval = sweep_interval
        self._writes = 0

    def __len__(self) -> int:
        """Physical entry count, expired-but-unswept entries included."""
        with self._lock:
            return len(self._store_map)

    def __contains__(self, key: object) -> bool:
        try:
            return self.has(key)  # type: ignore[arg-type]
        except InvalidKeyError:
            return False

    # -- storage primitives -------------------------------------------------

    def _load(self, key: str) -> t.Optional[CacheEntry]:
        entry = self._store_map.get(key)
        if entry is not None:
            # mark as recently used
            self._store_map.move_to_end(key)
        return entry

    def _store(self, entry: CacheEntry) -> None:
        self._store_map[entry.key] = entry
        self._store_map.move_to_end(entry.key)
        if entry.expires_at is not None:
            heapq.heappush(self._expiry_heap, (entry.expires_at, entry.key))
        if self._max_size is not None and len(self._store_map) > self._max_size:
            evicted, _ = self._store_map.popitem(last=False)
            _logger.debug("Evicted least recently used key=%r", evicted)
        self._writes += 1
        if self._sweep_interval and self._writes % self._sweep_interval == 0:
            removed = self._sweep(self._clock())
            if removed:
                self.metrics.expirations.inc(removed)
        self._compact_heap()

    def _remove(self, key: str) -> None:
        self._store_map.pop(key, None)

    def _remove_all(self) -> None:
        self._store_map.clear()
        self._expiry_heap.clear()

    def _expired_keys(self, now: float) -> t.List[str]:
        expired: t.List[str] = []
        while self._expiry_heap and self._expiry_heap[0][0] <= now:
            expires_at, key = heapq.heappop(self._expiry_heap)
            entry = self._store_map.get(key)
            if entry is not None and entry.expires_at == expires_at and key not in expired:
                expired.append(key)
        return expired

    def _requeue_expired(self, keys: t.List[str]) -> None:
        for key in keys:
            entry = self._store_map.get(key)
            if entry is not None and entry.expires_at is not None:
                heapq.heappush(self._expiry_heap, (entry.expires_at, key))

    # -- internals ----------------------------------------------------------

    def _sweep(self, now: float) -> int:
        expired = self._expired_keys(now)
        for key in expired:
            self._store_map.pop(key, None)
        if expired:
            _logger.debug("Swept %d expired entries", len(expired))
        return len(expired)

    def _compact_heap(self) -> None:
        # overwrites and deletes leave stale heap items behind
        if len(self._expiry_heap) <= 2 * len(self._store_map) + 64:
            return
        self._expiry_heap = [
            (entry.expires_at, key) for key, entry in self._store_map.items() if entry.expires_at is not None
        ]
        heapq.heapify(self._expiry_heap)
