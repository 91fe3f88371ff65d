"""Tests for TrendingLoader."""

from __future__ import annotations

from unittest.mock import AsyncMock

from moviescout.application.use_cases.load_trending import TrendingLoader
from moviescout.domain.entities.errors import CountServiceFailure


class TestTrendingLoader:
    async def test_loads_entries(self, mock_search_counts, trending_entries) -> None:
        loader = TrendingLoader(mock_search_counts, limit=5)

        result = await loader.load()

        assert result == trending_entries
        assert loader.entries == trending_entries
        assert loader.loaded is True
        mock_search_counts.get_trending.assert_awaited_once_with(limit=5)

    async def test_passes_limit(self, mock_search_counts) -> None:
        loader = TrendingLoader(mock_search_counts, limit=3)
        await loader.load()
        mock_search_counts.get_trending.assert_awaited_once_with(limit=3)

    async def test_loads_only_once(self, mock_search_counts, trending_entries) -> None:
        loader = TrendingLoader(mock_search_counts)

        await loader.load()
        second = await loader.load()

        assert second == trending_entries
        assert mock_search_counts.get_trending.await_count == 1

    async def test_failure_yields_empty_list(self, mock_search_counts) -> None:
        mock_search_counts.get_trending = AsyncMock(
            side_effect=CountServiceFailure("backend down")
        )
        loader = TrendingLoader(mock_search_counts)

        result = await loader.load()

        assert result == []
        assert loader.loaded is True

    async def test_unexpected_error_is_contained(self, mock_search_counts) -> None:
        mock_search_counts.get_trending = AsyncMock(side_effect=KeyError("count"))
        loader = TrendingLoader(mock_search_counts)

        assert await loader.load() == []

    async def test_failure_is_not_retried(self, mock_search_counts) -> None:
        mock_search_counts.get_trending = AsyncMock(side_effect=CountServiceFailure())
        loader = TrendingLoader(mock_search_counts)

        await loader.load()
        await loader.load()

        assert mock_search_counts.get_trending.await_count == 1

    async def test_entries_is_a_copy(self, mock_search_counts) -> None:
        loader = TrendingLoader(mock_search_counts)
        await loader.load()

        loader.entries.clear()

        assert len(loader.entries) == 2
