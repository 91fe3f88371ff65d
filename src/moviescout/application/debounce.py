"""Debounced search input.

Raw keystroke-level text is committed only after it stayed unchanged for
the quiescence window. Every new value restarts the window, so a burst of
edits produces a single commit carrying the last value.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import structlog

log = structlog.get_logger(__name__)

CommitCallback = Callable[[str], None]

DEFAULT_DELAY_SECONDS = 0.5


class DebouncedSearchController:
    """Turns raw search input into a stable committed term.

    Args:
        on_commit: Called once per quiescence period with the committed
            value. Runs on the event loop, must not block.
        delay_seconds: Quiescence window.
    """

    def __init__(
        self,
        on_commit: CommitCallback | None = None,
        *,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
    ) -> None:
        if delay_seconds < 0:
            raise ValueError("delay_seconds must be >= 0")
        self._on_commit = on_commit
        self.delay_seconds = delay_seconds
        self._raw = ""
        self._committed = ""
        self._timer: asyncio.Task[None] | None = None

    @property
    def raw(self) -> str:
        return self._raw

    @property
    def committed(self) -> str:
        """Last committed value. Empty means browse mode, not "no results"."""
        return self._committed

    @property
    def pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def set_raw(self, value: str) -> None:
        """Accept a new raw value and restart the quiescence window.

        Must be called from within a running event loop.
        """
        if value == self._raw:
            return
        self._raw = value
        self._cancel_timer()
        self._timer = asyncio.get_running_loop().create_task(
            self._commit_after_delay(value)
        )

    async def wait(self) -> None:
        """Wait until the pending window (if any) has fired or was cancelled."""
        while self._timer is not None and not self._timer.done():
            timer = self._timer
            try:
                await asyncio.shield(timer)
            except asyncio.CancelledError:
                if not timer.cancelled():
                    raise

    async def aclose(self) -> None:
        self._cancel_timer()
        self._timer = None

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()

    async def _commit_after_delay(self, value: str) -> None:
        await asyncio.sleep(self.delay_seconds)
        self._committed = value
        log.debug("search_term_committed", term=value)
        if self._on_commit is not None:
            self._on_commit(value)
