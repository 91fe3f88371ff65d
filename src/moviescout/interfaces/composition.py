"""Composition root: builds and tears down the client core."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
import structlog

from moviescout.application.app_controller import AppController
from moviescout.application.use_cases.load_trending import TrendingLoader
from moviescout.infrastructure.cache.cache_factory import create_cache
from moviescout.infrastructure.config.schema import AppConfig
from moviescout.infrastructure.persistence.search_count_cache import (
    CacheSearchCountStore,
)
from moviescout.infrastructure.tmdb.client import HttpxMovieCatalogClient

log = structlog.get_logger(__name__)


class MissingApiToken(RuntimeError):
    """Raised when no TMDB token is configured."""


@asynccontextmanager
async def session(config: AppConfig) -> AsyncIterator[AppController]:
    """Initialize and clean up all resources for one client session.

    Order matters:
        1. Storage (search counts depend on it)
        2. HTTP client (catalog depends on it)
        3. Search-count store, catalog client, trending loader
        4. App controller
    """
    if not config.tmdb_api_token:
        raise MissingApiToken(
            "No TMDB token configured (set MOVIESCOUT_TMDB_API_TOKEN or tmdb.api_token)"
        )

    # 1) Storage
    cache = create_cache(
        backend=config.cache.backend,
        directory=str(config.cache.directory),
        redis_url=config.cache.redis_url,
        max_concurrent=config.cache.max_concurrent,
    )
    await cache.__aenter__()
    log.info("cache_initialized", backend=config.cache.backend)

    # 2) HTTP client; transport default timeout only, no retries
    http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
    )

    # 3) Collaborators
    search_counts = CacheSearchCountStore(
        cache=cache,
        ttl_days=config.search_count_ttl_days,
        image_base_url=config.tmdb_image_base_url,
    )
    catalog = HttpxMovieCatalogClient(
        api_token=config.tmdb_api_token,
        http_client=http_client,
        search_counts=search_counts,
        base_url=config.tmdb_base_url,
    )
    trending_loader = TrendingLoader(search_counts, limit=config.search.trending_limit)

    # 4) Controller
    controller = AppController(
        catalog=catalog,
        trending_loader=trending_loader,
        debounce_seconds=config.search.debounce_seconds,
        sentinel_threshold=config.search.sentinel_threshold,
    )
    log.info("session_startup_complete")

    try:
        yield controller
    finally:
        await controller.aclose()

        await http_client.aclose()
        log.info("http_client_closed")

        await cache.aclose()
        log.info("cache_closed")

        log.info("session_shutdown_complete")
