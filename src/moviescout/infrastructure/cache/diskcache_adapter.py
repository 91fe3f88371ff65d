"""Diskcache adapter - SQLite-based key-value store without daemon process."""

from __future__ import annotations

import asyncio
import pickle
from collections.abc import Callable
from pathlib import Path
from typing import Any, Optional, TypeVar

import structlog
from diskcache import Cache as DiskCache

log = structlog.get_logger(__name__)

_T = TypeVar("_T")


class DiskcacheAdapter:
    """Local CachePort on top of ``diskcache.Cache``.

    diskcache is synchronous, so every operation runs in a worker thread
    via ``asyncio.to_thread``; a semaphore bounds how many of those hit
    the SQLite file at once. Open it with ``async with``.

    Args:
        directory: Directory holding the SQLite files.
        ttl_seconds: TTL used by ``set()`` when none is passed.
            ``0`` stores entries without expiry.
        max_concurrent: Max parallel disk operations.
    """

    def __init__(
        self,
        directory: str | Path = "./cache",
        ttl_seconds: int = 0,
        max_concurrent: int = 10,
    ) -> None:
        self.directory = Path(directory)
        self.default_ttl = ttl_seconds
        self.max_concurrent = max_concurrent
        self._cache: DiskCache | None = None
        self._semaphore = asyncio.Semaphore(max_concurrent)
        log.info(
            "diskcache_adapter_init",
            directory=str(self.directory),
            max_concurrent=max_concurrent,
        )

    async def __aenter__(self) -> DiskcacheAdapter:
        if self._cache is None:
            self._cache = await asyncio.to_thread(DiskCache, str(self.directory))
            log.info("diskcache_opened", path=str(self.directory))
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        cache, self._cache = self._cache, None
        if cache is not None:
            await asyncio.to_thread(cache.close)
            log.info("diskcache_closed", directory=str(self.directory))

    def _require_open(self) -> DiskCache:
        if self._cache is None:
            raise RuntimeError(
                "Cache not initialized. Use 'async with cache:' or await cache.__aenter__()"
            )
        return self._cache

    async def _run(self, fn: Callable[..., _T], *args: Any, **kwargs: Any) -> _T:
        async with self._semaphore:
            return await asyncio.to_thread(fn, *args, **kwargs)

    # --- CachePort implementation ---
    async def get(self, key: str) -> Optional[Any]:
        value = await self._run(self._require_open().get, key, default=None)
        log.debug("cache_get", key=key, hit=value is not None)
        return value

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        """Store *value*; ``ttl=None`` falls back to the default TTL."""
        expire = (self.default_ttl if ttl is None else ttl) or None
        await self._run(self._require_open().set, key, value, expire=expire)
        log.debug("cache_set", key=key, ttl=expire, size_bytes=len(pickle.dumps(value)))

    async def incr(self, key: str, amount: int = 1, *, ttl: int | None = None) -> int:
        """Atomic counter increment. ``ttl=None`` leaves expiry untouched."""
        cache = self._require_open()

        def _incr() -> int:
            value = cache.incr(key, delta=amount, default=0)
            if ttl is not None:
                cache.touch(key, expire=ttl or None)
            return value

        value = await self._run(_incr)
        log.debug("cache_incr", key=key, amount=amount, value=value)
        return value

    async def delete(self, key: str) -> bool:
        """Remove *key*. False when it was absent or the cache is closed."""
        if self._cache is None:
            return False
        deleted = await self._run(self._cache.delete, key)
        log.debug("cache_delete", key=key, deleted=deleted)
        return deleted
