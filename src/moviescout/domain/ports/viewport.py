"""Port for viewport intersection signals."""

from __future__ import annotations

from collections.abc import Callable, Hashable
from typing import Protocol, runtime_checkable

VisibilityCallback = Callable[[bool], None]


@runtime_checkable
class VisibilityObserverPort(Protocol):
    """Notifies when an element crosses a visibility threshold.

    ``threshold=1.0`` means "fully visible". The callback receives True
    when the element enters the threshold and False when it leaves it.
    """

    def observe(
        self,
        target: Hashable,
        callback: VisibilityCallback,
        *,
        threshold: float = 1.0,
    ) -> None: ...

    def unobserve(self, target: Hashable) -> None: ...
