"""Tests for ManualVisibilityObserver."""

from __future__ import annotations

import pytest

from moviescout.infrastructure.viewport.manual_observer import ManualVisibilityObserver


class TestManualVisibilityObserver:
    def test_first_report_always_notifies(self) -> None:
        seen: list[bool] = []
        observer = ManualVisibilityObserver()
        observer.observe("s", seen.append)

        observer.emit("s", 0.0)

        assert seen == [False]

    def test_notifies_on_crossings_only(self) -> None:
        seen: list[bool] = []
        observer = ManualVisibilityObserver()
        observer.observe("s", seen.append, threshold=0.5)

        for ratio in (0.1, 0.2, 0.6, 1.0, 0.4, 0.5):
            observer.emit("s", ratio)

        assert seen == [False, True, False, True]

    def test_full_visibility_threshold(self) -> None:
        seen: list[bool] = []
        observer = ManualVisibilityObserver()
        observer.observe("s", seen.append)

        observer.emit("s", 0.99)
        observer.emit("s", 1.0)

        assert seen == [False, True]

    def test_unknown_target_is_ignored(self) -> None:
        observer = ManualVisibilityObserver()
        observer.emit("nobody", 1.0)
        assert observer.targets == []

    def test_unobserve_stops_notifications(self) -> None:
        seen: list[bool] = []
        observer = ManualVisibilityObserver()
        observer.observe("s", seen.append)
        observer.unobserve("s")

        observer.emit("s", 1.0)

        assert seen == []
        assert observer.targets == []

    def test_reobserve_resets_last_state(self) -> None:
        seen: list[bool] = []
        observer = ManualVisibilityObserver()
        observer.observe("s", seen.append)
        observer.emit("s", 1.0)

        observer.observe("s", seen.append)
        observer.emit("s", 1.0)

        assert seen == [True, True]

    def test_targets_are_independent(self) -> None:
        a: list[bool] = []
        b: list[bool] = []
        observer = ManualVisibilityObserver()
        observer.observe("a", a.append)
        observer.observe("b", b.append)

        observer.emit("a", 1.0)

        assert a == [True]
        assert b == []

    @pytest.mark.parametrize("threshold", [-0.1, 1.5])
    def test_rejects_invalid_threshold(self, threshold: float) -> None:
        observer = ManualVisibilityObserver()
        with pytest.raises(ValueError, match="threshold"):
            observer.observe("s", lambda visible: None, threshold=threshold)
