"""In-process visibility observer driven by explicit ``emit()`` calls."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass

import structlog

from moviescout.domain.ports.viewport import VisibilityCallback

log = structlog.get_logger(__name__)


@dataclass
class _Observation:
    callback: VisibilityCallback
    threshold: float


class ManualVisibilityObserver:
    """Implements ``VisibilityObserverPort`` for headless front ends.

    The front end reports the visible ratio of each target; the observer
    turns ratios into threshold crossings like a browser
    IntersectionObserver does: the first report always notifies, later
    reports only when the target crosses its threshold.
    """

    def __init__(self) -> None:
        self._observations: dict[Hashable, _Observation] = {}
        self._last: dict[Hashable, bool] = {}

    @property
    def targets(self) -> list[Hashable]:
        return list(self._observations)

    def observe(
        self,
        target: Hashable,
        callback: VisibilityCallback,
        *,
        threshold: float = 1.0,
    ) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be within [0, 1], got {threshold}")
        self._observations[target] = _Observation(callback, threshold)
        self._last.pop(target, None)
        log.debug("viewport_observe", target=target, threshold=threshold)

    def unobserve(self, target: Hashable) -> None:
        self._observations.pop(target, None)
        self._last.pop(target, None)
        log.debug("viewport_unobserve", target=target)

    def emit(self, target: Hashable, ratio: float) -> None:
        """Report that *ratio* (0.0-1.0) of *target* is inside the viewport."""
        observation = self._observations.get(target)
        if observation is None:
            return

        visible = ratio >= observation.threshold
        if self._last.get(target) is visible:
            return
        self._last[target] = visible
        observation.callback(visible)
