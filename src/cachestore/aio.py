"""Awaitable facade for using a cache from asyncio code."""

from __future__ import annotations

import functools
import typing as t

import anyio.to_thread

from .core.models import TTLLike
from .storage.base import Cache, Pairs


class AsyncCache:
    """Runs each call of a synchronous Cache in a worker thread.

    Errors propagate exactly as from the wrapped cache.
    """

    def __init__(self, cache: Cache) -> None:
        self._cache = cache

    @property
    def cache(self) -> Cache:
        return self._cache

    async def _run(self, fn: t.Callable[..., t.Any], *args: t.Any, **kwargs: t.Any) -> t.Any:
        return await anyio.to_thread.run_sync(functools.partial(fn, *args, **kwargs))

    async def get(self, key: str, default: t.Any = None) -> t.Any:
        return await self._run(self._cache.get, key, default)

    async def has(self, key: str) -> bool:
        return await self._run(self._cache.has, key)

    async def get_multiple(self, keys: t.Iterable[str], default: t.Any = None) -> t.List[t.Tuple[str, t.Any]]:
        return await self._run(self._cache.get_multiple, keys, default)

    async def set(self, key: str, value: t.Any, ttl: TTLLike = None) -> bool:
        return await self._run(self._cache.set, key, value, ttl)

    async def set_multiple(self, values: Pairs, ttl: TTLLike = None) -> bool:
        return await self._run(self._cache.set_multiple, values, ttl)

    async def delete(self, key: str) -> bool:
        return await self._run(self._cache.delete, key)

    async def delete_multiple(self, keys: t.Iterable[str]) -> bool:
        return await self._run(self._cache.delete_multiple, keys)

    async def clear(self) -> bool:
        return await self._run(self._cache.clear)
