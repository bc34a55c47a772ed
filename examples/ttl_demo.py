#!/usr/bin/env python3

import asyncio
import logging
import time

import click

from cachestore import AsyncCache, CacheConfig, build_cache


def _now() -> str:
    return time.strftime("%H:%M:%S")


async def _async_roundtrip(cache) -> None:
    acache = AsyncCache(cache)
    await acache.set("async-key", {"from": "asyncio"})
    click.echo(f"[{_now()}] async get -> {await acache.get('async-key')}")


@click.command()
@click.option("--ttl", default=1.0, show_default=True, help="TTL in seconds for the demo entries")
@click.option("--max-size", default=None, type=int, help="LRU bound for the in-memory store")
@click.option("--serializer", type=click.Choice(["pickle", "json"]), default="pickle", show_default=True)
@click.option("--verbose", is_flag=True, help="Enable DEBUG logging for cachestore")
def main(ttl: float, max_size: int | None, serializer: str, verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)
    config = CacheConfig.from_dict({"store": {"max_size": max_size}, "serializer": {"format": serializer}})
    cache = build_cache(config)

    cache.set_multiple({"a": 1, "b": 2}, ttl=ttl)
    cache.set("forever", "no ttl")
    click.echo(f"[{_now()}] get_multiple -> {cache.get_multiple(['a', 'b', 'c'], default=0)}")

    click.echo(f"[{_now()}] sleeping {ttl + 0.1:.1f}s ...")
    time.sleep(ttl + 0.1)
    click.echo(f"[{_now()}] after ttl -> {cache.get_multiple(['a', 'b', 'forever'], default=0)}")

    asyncio.run(_async_roundtrip(cache))
    click.echo(f"[{_now()}] hit ratio: {cache.metrics.hit_ratio():.2f}")


if __name__ == "__main__":
    main()
