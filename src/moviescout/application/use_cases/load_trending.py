"""Trending use case: one-shot load of the most-searched movies."""

from __future__ import annotations

import structlog

from moviescout.domain.entities.movie import TrendingEntry
from moviescout.domain.ports.search_count import SearchCountPort

log = structlog.get_logger(__name__)


class TrendingLoader:
    """Loads the trending list once at startup.

    Failures are logged and leave the list empty; they never reach the
    rest of the application.
    """

    def __init__(self, search_counts: SearchCountPort, *, limit: int = 5) -> None:
        self._search_counts = search_counts
        self._limit = limit
        self._entries: list[TrendingEntry] = []
        self._loaded = False

    @property
    def entries(self) -> list[TrendingEntry]:
        return list(self._entries)

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def load(self) -> list[TrendingEntry]:
        """Fetch the top entries.

        Returns:
            The trending list (empty on error). Later calls return the
            already-loaded list without querying again.
        """
        if self._loaded:
            return self.entries

        try:
            entries = await self._search_counts.get_trending(limit=self._limit)
        except Exception:
            log.error("trending_load_failed", exc_info=True)
            return self.entries
        finally:
            self._loaded = True

        self._entries = list(entries)
        log.info("trending_loaded", count=len(self._entries))
        return self.entries
