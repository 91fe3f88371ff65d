"""Shared test fixtures for the moviescout test suite."""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import AsyncMock

import pytest

from moviescout.domain.entities.errors import MovieScoutError
from moviescout.domain.entities.movie import FIRST_CURSOR, Movie, Page, TrendingEntry

# ---------------------------------------------------------------------------
# Domain entity helpers
# ---------------------------------------------------------------------------


def _make_movie(movie_id: int, title: str | None = None, **extra: Any) -> Movie:
    payload = {
        "id": movie_id,
        "title": title or f"Movie {movie_id}",
        "poster_path": f"/poster-{movie_id}.jpg",
        "popularity": 100.0 - movie_id,
        "vote_average": 7.5,
        "release_date": "1999-03-31",
        "original_language": "en",
        **extra,
    }
    return Movie.from_payload(payload)


def _make_page(
    cursor: int = FIRST_CURSOR,
    *,
    count: int = 3,
    next_cursor: int | None = None,
    start_id: int | None = None,
) -> Page:
    first = start_id if start_id is not None else cursor * 100
    return Page(
        movies=tuple(_make_movie(first + i) for i in range(count)),
        cursor=cursor,
        next_cursor=next_cursor,
    )


@pytest.fixture()
def movie() -> Movie:
    return _make_movie(603, "The Matrix", poster_path="/matrix.jpg")


@pytest.fixture()
def trending_entries() -> list[TrendingEntry]:
    return [
        TrendingEntry(
            id="a1", search_term="matrix", movie_id=603, count=7,
            poster_url="https://image.tmdb.org/t/p/w500/matrix.jpg", title="The Matrix",
        ),
        TrendingEntry(
            id="b2", search_term="alien", movie_id=348, count=3,
            poster_url="https://image.tmdb.org/t/p/w500/alien.jpg", title="Alien",
        ),
    ]


# ---------------------------------------------------------------------------
# Fake ports
# ---------------------------------------------------------------------------


class GatedCatalog:
    """MovieCatalogPort fake whose responses are released by the test.

    Each (term, cursor) request blocks until ``resolve()`` or ``fail()`` is
    called for it, which lets tests resolve requests out of order.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, int]] = []
        self._gates: dict[tuple[str, int], asyncio.Future[Page]] = {}

    def _gate(self, term: str, cursor: int) -> asyncio.Future[Page]:
        key = (term, cursor)
        if key not in self._gates:
            self._gates[key] = asyncio.get_running_loop().create_future()
        return self._gates[key]

    async def fetch(self, term: str, cursor: int = FIRST_CURSOR) -> Page:
        self.calls.append((term, cursor))
        return await self._gate(term, cursor)

    def resolve(self, term: str, cursor: int, page: Page) -> None:
        self._gate(term, cursor).set_result(page)

    def fail(self, term: str, cursor: int, error: MovieScoutError) -> None:
        self._gate(term, cursor).set_exception(error)


class StaticCatalog:
    """MovieCatalogPort fake answering immediately from a lookup table."""

    def __init__(self, pages: dict[tuple[str, int], Page | Exception]) -> None:
        self.pages = pages
        self.calls: list[tuple[str, int]] = []

    async def fetch(self, term: str, cursor: int = FIRST_CURSOR) -> Page:
        self.calls.append((term, cursor))
        await asyncio.sleep(0)
        result = self.pages.get((term, cursor), Page(movies=(), cursor=cursor))
        if isinstance(result, Exception):
            raise result
        return result


async def _settle(rounds: int = 10) -> None:
    """Let pending tasks run until they block."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture()
def gated_catalog() -> GatedCatalog:
    return GatedCatalog()


@pytest.fixture()
def mock_cache() -> AsyncMock:
    """Mock CachePort."""
    cache = AsyncMock()
    cache.get = AsyncMock(return_value=None)
    cache.set = AsyncMock()
    cache.incr = AsyncMock(return_value=1)
    cache.delete = AsyncMock(return_value=True)
    cache.aclose = AsyncMock()
    return cache


@pytest.fixture()
def mock_search_counts(trending_entries: list[TrendingEntry]) -> AsyncMock:
    """Mock SearchCountPort."""
    counts = AsyncMock()
    counts.record_search = AsyncMock(return_value=None)
    counts.get_trending = AsyncMock(return_value=trending_entries)
    return counts


# ---------------------------------------------------------------------------
# Factory fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_movie():
    return _make_movie


@pytest.fixture()
def make_page():
    return _make_page


@pytest.fixture()
def settle():
    return _settle


@pytest.fixture()
def static_catalog():
    return StaticCatalog
