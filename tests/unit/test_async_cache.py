"""Unit tests for AsyncCache."""

import asyncio

import pytest

from cachestore.aio import AsyncCache
from cachestore.core.errors import InvalidKeyError, NotSerializableError


@pytest.mark.asyncio
class TestAsyncCache:
    """Test the awaitable facade."""

    async def test_set_get_delete(self, cache):
        """Test single-key operations."""
        acache = AsyncCache(cache)
        assert await acache.set("k", {"v": 1}) is True
        assert await acache.get("k") == {"v": 1}
        assert await acache.has("k") is True
        assert await acache.delete("k") is True
        assert await acache.get("k", "default") == "default"

    async def test_batch_operations(self, cache):
        """Test batch operations and clear."""
        acache = AsyncCache(cache)
        assert await acache.set_multiple({"a": 1, "b": 2}) is True
        assert await acache.get_multiple(["a", "b", "c"], default=0) == [("a", 1), ("b", 2), ("c", 0)]
        assert await acache.delete_multiple(["a"]) is True
        assert await acache.clear() is True
        assert await acache.get_multiple(["a", "b"]) == [("a", None), ("b", None)]

    async def test_ttl_passed_through(self, cache, clock):
        """Test ttl reaches the wrapped cache."""
        acache = AsyncCache(cache)
        await acache.set("k", "v", ttl=5)
        clock.advance(5)
        assert await acache.get("k") is None

    async def test_errors_propagate(self, cache):
        """Test caller errors surface from the awaitable calls."""
        acache = AsyncCache(cache)
        with pytest.raises(InvalidKeyError):
            await acache.get("bad key")
        with pytest.raises(NotSerializableError):
            await acache.set("gen", (i for i in range(3)))
        with pytest.raises(InvalidKeyError):
            await acache.get_multiple("abc")

    async def test_concurrent_tasks(self, cache):
        """Test many concurrent tasks on distinct keys."""
        acache = AsyncCache(cache)
        results = await asyncio.gather(*(acache.set(f"k{i}", i) for i in range(50)))
        assert all(results)
        values = await acache.get_multiple([f"k{i}" for i in range(50)])
        assert values == [(f"k{i}", i) for i in range(50)]
        assert acache.cache is cache
