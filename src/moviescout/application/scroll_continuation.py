"""Infinite scroll: request the next page when the sentinel becomes visible."""

from __future__ import annotations

import asyncio
from collections.abc import Hashable
from types import TracebackType

import structlog

from moviescout.application.query_engine import PaginatedQueryEngine
from moviescout.domain.ports.viewport import VisibilityObserverPort

log = structlog.get_logger(__name__)


class ScrollContinuation:
    """Wires sentinel visibility to ``PaginatedQueryEngine.fetch_next``.

    Observation is scoped: it starts on ``__enter__`` and is released on
    ``__exit__`` no matter how the block is left::

        with ScrollContinuation(engine, observer, "sentinel") as scroll:
            ...

    Each transition of the sentinel into visibility requests exactly one
    next page, provided the engine has one and is not already fetching.
    Only transitions count: a sentinel that stays visible while a page
    lands with more to come does not trigger again until it leaves and
    re-enters the viewport.

    ``aclose`` detaches and cancels continuation fetches still running.
    """

    def __init__(
        self,
        engine: PaginatedQueryEngine,
        observer: VisibilityObserverPort,
        sentinel: Hashable,
        *,
        threshold: float = 1.0,
    ) -> None:
        self._engine = engine
        self._observer = observer
        self._sentinel = sentinel
        self._threshold = threshold
        self._visible = False
        self._attached = False
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def attached(self) -> bool:
        return self._attached

    @property
    def visible(self) -> bool:
        return self._visible

    def attach(self) -> None:
        if self._attached:
            return
        self._observer.observe(
            self._sentinel, self.on_visibility_change, threshold=self._threshold
        )
        self._attached = True
        log.debug("scroll_sentinel_attached", sentinel=self._sentinel)

    def detach(self) -> None:
        if not self._attached:
            return
        self._attached = False
        self._visible = False
        self._observer.unobserve(self._sentinel)
        log.debug("scroll_sentinel_detached", sentinel=self._sentinel)

    def __enter__(self) -> ScrollContinuation:
        self.attach()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.detach()

    def on_visibility_change(self, visible: bool) -> None:
        """Observer callback. Must run on the event loop thread."""
        if not self._attached:
            return

        entered = visible and not self._visible
        self._visible = visible
        if not entered:
            return

        if not self._engine.has_next or self._engine.is_fetching:
            log.debug(
                "scroll_continuation_idle",
                has_next=self._engine.has_next,
                fetching=self._engine.is_fetching,
            )
            return

        log.debug("scroll_continuation_triggered", term=self._engine.term)
        task = asyncio.get_running_loop().create_task(self._engine.fetch_next())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def aclose(self) -> None:
        self.detach()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def wait(self) -> None:
        """Wait for every continuation fetch requested so far."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks))
