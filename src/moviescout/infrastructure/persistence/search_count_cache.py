"""Search-count persistence backed by CachePort (diskcache/redis)."""

from __future__ import annotations

import asyncio
import hashlib
import json

import structlog

from moviescout.domain.entities.errors import CountServiceFailure
from moviescout.domain.entities.movie import Movie, TrendingEntry, poster_url
from moviescout.domain.ports.cache import CachePort

log = structlog.get_logger(__name__)

# Cache key for the term index (list of all recorded search terms).
_INDEX_KEY: str = "search:_index"


def _count_key(term: str) -> str:
    return f"search:count:{term}"


def _entry_key(term: str) -> str:
    return f"search:entry:{term}"


def entry_id(term: str) -> str:
    """Stable persistence id for a search term."""
    return hashlib.sha1(term.encode("utf-8")).hexdigest()[:20]


def _serialize_entry(term: str, movie: Movie, image_base_url: str) -> str:
    return json.dumps(
        {
            "id": entry_id(term),
            "search_term": term,
            "movie_id": movie.id,
            "title": movie.title,
            "poster_url": poster_url(movie.poster_path, image_base_url),
        }
    )


def _deserialize_entry(data: str, count: int) -> TrendingEntry:
    d = json.loads(data)
    return TrendingEntry(
        id=d["id"],
        search_term=d["search_term"],
        movie_id=d["movie_id"],
        count=count,
        poster_url=d.get("poster_url", ""),
        title=d.get("title", ""),
    )


class CacheSearchCountStore:
    """Stores per-term search counters via CachePort.

    Key schema:
    - ``search:count:{term}`` → integer counter (atomic increments)
    - ``search:entry:{term}`` → JSON with the term's representative movie
    - ``search:_index`` → JSON list of recorded terms

    Backend failures surface as ``CountServiceFailure``.

    Counters are atomic in the backend. Index updates are a
    read-modify-write and run under a per-store lock.
    """

    def __init__(
        self,
        cache: CachePort,
        ttl_days: int = 365,
        image_base_url: str = "https://image.tmdb.org/t/p/w500",
    ) -> None:
        self.cache = cache
        self.ttl = ttl_days * 86_400
        self.image_base_url = image_base_url
        self._index_lock = asyncio.Lock()

    async def record_search(self, term: str, top_result: Movie) -> None:
        try:
            count = await self.cache.incr(_count_key(term), ttl=self.ttl)
            await self.cache.set(
                _entry_key(term),
                _serialize_entry(term, top_result, self.image_base_url),
                ttl=self.ttl,
            )
            await self._add_to_index(term)
        except Exception as e:
            raise CountServiceFailure(f"Could not record search {term!r}") from e

        log.debug("search_count_recorded", term=term, count=count, movie_id=top_result.id)

    async def get_trending(self, limit: int = 5) -> list[TrendingEntry]:
        try:
            entries = [entry for entry in await self._list_entries() if entry.count > 0]
        except Exception as e:
            raise CountServiceFailure("Could not load trending searches") from e

        entries.sort(key=lambda entry: (-entry.count, entry.search_term))
        return entries[:limit]

    # -- internal helpers --------------------------------------------------

    async def _list_entries(self) -> list[TrendingEntry]:
        results: list[TrendingEntry] = []
        for term in await self._load_index():
            data = await self.cache.get(_entry_key(term))
            if data is None:
                continue
            # Incrementing by zero reads the counter atomically.
            count = await self.cache.incr(_count_key(term), 0)
            try:
                results.append(_deserialize_entry(data, count))
            except (json.JSONDecodeError, KeyError, TypeError) as e:
                log.error("search_entry_deserialize_error", term=term, error=str(e))
        return results

    async def _load_index(self) -> list[str]:
        data = await self.cache.get(_INDEX_KEY)
        if data is None:
            return []
        try:
            return json.loads(data)
        except (json.JSONDecodeError, TypeError):
            return []

    async def _add_to_index(self, term: str) -> None:
        async with self._index_lock:
            index = await self._load_index()
            if term not in index:
                index.append(term)
                await self._save_index(index)

    async def _save_index(self, index: list[str]) -> None:
        await self.cache.set(_INDEX_KEY, json.dumps(index), ttl=self.ttl)
