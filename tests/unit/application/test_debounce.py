"""Tests for DebouncedSearchController."""

from __future__ import annotations

import asyncio

import pytest

from moviescout.application.debounce import DebouncedSearchController

_DELAY = 0.05


class TestDebounce:
    async def test_burst_commits_once_with_last_value(self) -> None:
        commits: list[str] = []
        ctrl = DebouncedSearchController(commits.append, delay_seconds=_DELAY)

        for text in ("b", "ba", "bat", "batm", "batman"):
            ctrl.set_raw(text)
            await asyncio.sleep(_DELAY / 5)

        assert commits == []
        assert ctrl.pending is True

        await ctrl.wait()

        assert commits == ["batman"]
        assert ctrl.committed == "batman"
        assert ctrl.raw == "batman"
        assert ctrl.pending is False

    async def test_raw_updates_immediately(self) -> None:
        ctrl = DebouncedSearchController(delay_seconds=_DELAY)
        ctrl.set_raw("ali")
        assert ctrl.raw == "ali"
        assert ctrl.committed == ""
        await ctrl.aclose()

    async def test_separate_pauses_commit_separately(self) -> None:
        commits: list[str] = []
        ctrl = DebouncedSearchController(commits.append, delay_seconds=_DELAY)

        ctrl.set_raw("alien")
        await ctrl.wait()
        ctrl.set_raw("aliens")
        await ctrl.wait()

        assert commits == ["alien", "aliens"]

    async def test_clearing_commits_empty_term(self) -> None:
        commits: list[str] = []
        ctrl = DebouncedSearchController(commits.append, delay_seconds=_DELAY)

        ctrl.set_raw("x")
        await ctrl.wait()
        ctrl.set_raw("")
        await ctrl.wait()

        assert commits == ["x", ""]
        assert ctrl.committed == ""

    async def test_same_value_does_not_restart_window(self) -> None:
        commits: list[str] = []
        ctrl = DebouncedSearchController(commits.append, delay_seconds=_DELAY)

        ctrl.set_raw("dune")
        await ctrl.wait()
        ctrl.set_raw("dune")

        assert ctrl.pending is False
        assert commits == ["dune"]

    async def test_aclose_cancels_pending_commit(self) -> None:
        commits: list[str] = []
        ctrl = DebouncedSearchController(commits.append, delay_seconds=_DELAY)

        ctrl.set_raw("heat")
        await ctrl.aclose()
        await asyncio.sleep(_DELAY * 2)

        assert commits == []
        assert ctrl.committed == ""

    async def test_wait_without_pending_returns(self) -> None:
        ctrl = DebouncedSearchController(delay_seconds=_DELAY)
        await ctrl.wait()
        assert ctrl.pending is False

    async def test_zero_delay(self) -> None:
        commits: list[str] = []
        ctrl = DebouncedSearchController(commits.append, delay_seconds=0)
        ctrl.set_raw("up")
        await ctrl.wait()
        assert commits == ["up"]

    def test_negative_delay_rejected(self) -> None:
        with pytest.raises(ValueError, match="delay_seconds"):
            DebouncedSearchController(delay_seconds=-1)
