"""Redis adapter - async Redis via redis.asyncio."""

from __future__ import annotations

import asyncio
import pickle
from typing import Any

import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError

log = structlog.get_logger(__name__)


class RedisAdapter:
    """CachePort on a shared Redis instance.

    Lets several client processes share one set of search counters.
    Values are pickled like in the diskcache adapter; counters are stored
    as native Redis integers so ``INCRBY`` stays atomic across processes.

    Failure policy: a failed read is logged and reported as a miss, a
    failed write or increment is logged and re-raised so the caller can
    isolate it.

    Args:
        url: Redis URL (e.g. `redis://localhost:6379/0`).
        ttl_seconds: Default TTL for ``set()``. ``0`` stores without expiry.
        max_concurrent: Max parallel Redis commands.
    """

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        ttl_seconds: int = 0,
        max_concurrent: int = 50,
    ) -> None:
        self.url = url
        self.default_ttl = ttl_seconds
        self.max_concurrent = max_concurrent
        self._client: Redis | None = None
        self._semaphore = asyncio.Semaphore(max_concurrent)
        log.info("redis_adapter_init", url=url, max_concurrent=max_concurrent)

    async def __aenter__(self) -> RedisAdapter:
        if self._client is not None:
            return self
        client = Redis.from_url(self.url, decode_responses=False)
        try:
            await client.ping()
        except RedisError as e:
            log.error("redis_connection_failed", url=self.url, error=str(e))
            await client.aclose()
            raise
        self._client = client
        log.info("redis_connected", url=self.url)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()
            log.info("redis_closed")

    def _require_open(self) -> Redis:
        if self._client is None:
            raise RuntimeError("Redis not initialized. Use 'async with cache:'")
        return self._client

    # --- CachePort implementation ---
    async def get(self, key: str) -> Any | None:
        client = self._require_open()
        async with self._semaphore:
            try:
                raw = await client.get(key)
                value = None if raw is None else pickle.loads(raw)
            except (RedisError, pickle.PickleError) as e:
                log.error("redis_get_error", key=key, error=str(e))
                return None
        log.debug("cache_get", key=key, hit=value is not None)
        return value

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        client = self._require_open()
        expire = self.default_ttl if ttl is None else ttl
        packed = pickle.dumps(value)
        async with self._semaphore:
            try:
                await client.set(key, packed, ex=expire or None)
            except RedisError as e:
                log.error("redis_set_error", key=key, error=str(e))
                raise
        log.debug("cache_set", key=key, ttl=expire, size_bytes=len(packed))

    async def incr(self, key: str, amount: int = 1, *, ttl: int | None = None) -> int:
        """INCRBY; a truthy *ttl* also refreshes the key's expiry."""
        client = self._require_open()
        async with self._semaphore:
            try:
                value = int(await client.incrby(key, amount))
                if ttl:
                    await client.expire(key, ttl)
            except RedisError as e:
                log.error("redis_incr_error", key=key, error=str(e))
                raise
        log.debug("cache_incr", key=key, amount=amount, value=value)
        return value

    async def delete(self, key: str) -> bool:
        if self._client is None:
            return False
        async with self._semaphore:
            try:
                removed = await self._client.delete(key) > 0
            except RedisError as e:
                log.error("redis_delete_error", key=key, error=str(e))
                return False
        log.debug("cache_delete", key=key, deleted=removed)
        return removed
