"""Port for aggregate search popularity ("trending")."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from moviescout.domain.entities.movie import Movie, TrendingEntry


@runtime_checkable
class SearchCountPort(Protocol):
    """Persisted per-term search counters."""

    async def record_search(self, term: str, top_result: Movie) -> None:
        """Increment the counter for *term*, creating the entry on first use."""
        ...

    async def get_trending(self, limit: int = 5) -> list[TrendingEntry]:
        """Return the *limit* most-searched terms, highest count first."""
        ...
