"""Composition of search input, pagination, scrolling and trending.

``AppController`` owns the top-level state and exposes it to the
presentation layer as an immutable ``AppView``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine, Hashable
from dataclasses import dataclass
from typing import Any

import structlog

from moviescout.application.debounce import DEFAULT_DELAY_SECONDS, DebouncedSearchController
from moviescout.application.query_engine import PaginatedQueryEngine
from moviescout.application.scroll_continuation import ScrollContinuation
from moviescout.application.use_cases.load_trending import TrendingLoader
from moviescout.domain.entities.movie import Movie, QueryState, QueryStatus, TrendingEntry
from moviescout.domain.ports.catalog import MovieCatalogPort
from moviescout.domain.ports.viewport import VisibilityObserverPort

log = structlog.get_logger(__name__)

ViewListener = Callable[["AppView"], None]


@dataclass(frozen=True)
class AppView:
    """Render-ready data for the presentation layer."""

    movies: tuple[Movie, ...]
    is_loading_initial: bool
    is_loading_more: bool
    error_message: str | None
    has_more: bool
    trending: tuple[TrendingEntry, ...]
    search_text: str = ""
    committed_term: str = ""


class AppController:
    """Composition root of the client-side state machine.

    Keystrokes go through the debounce controller; each committed term
    re-keys the query engine; sentinel visibility continues pagination.
    """

    def __init__(
        self,
        *,
        catalog: MovieCatalogPort,
        trending_loader: TrendingLoader,
        debounce_seconds: float = DEFAULT_DELAY_SECONDS,
        sentinel_threshold: float = 1.0,
    ) -> None:
        self._engine = PaginatedQueryEngine(catalog, on_change=self._on_query_change)
        self._debounce = DebouncedSearchController(
            self._on_commit, delay_seconds=debounce_seconds
        )
        self._trending_loader = trending_loader
        self._trending: tuple[TrendingEntry, ...] = ()
        self._sentinel_threshold = sentinel_threshold
        self._listeners: list[ViewListener] = []
        self._tasks: set[asyncio.Task[Any]] = set()
        self._scrolls: list[ScrollContinuation] = []
        self._started = False

    @property
    def engine(self) -> PaginatedQueryEngine:
        return self._engine

    @property
    def search(self) -> DebouncedSearchController:
        return self._debounce

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Load trending and the first browse page concurrently."""
        if self._started:
            return
        self._started = True
        log.info("app_controller_started")
        await asyncio.gather(
            self.load_trending(),
            self._engine.fetch_first(self._debounce.committed),
        )

    async def wait_idle(self) -> None:
        """Wait for the pending debounce window and all spawned fetches."""
        await self._debounce.wait()
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def load_trending(self) -> None:
        """Load only the trending list, without touching the query state."""
        self._trending = tuple(await self._trending_loader.load())
        self._notify()

    async def aclose(self) -> None:
        """Stop the debounce timer and cancel all outstanding fetches."""
        await self._debounce.aclose()
        for scroll in self._scrolls:
            await scroll.aclose()
        self._scrolls.clear()
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        await self._engine.aclose()
        log.info("app_controller_closed")

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def set_search_text(self, text: str) -> None:
        """Raw input from the search box (one call per change)."""
        self._debounce.set_raw(text)
        self._notify()

    def scroll_continuation(
        self, observer: VisibilityObserverPort, sentinel: Hashable
    ) -> ScrollContinuation:
        """Scoped sentinel wiring; use as a context manager while mounted."""
        scroll = ScrollContinuation(
            self._engine, observer, sentinel, threshold=self._sentinel_threshold
        )
        self._scrolls.append(scroll)
        return scroll

    def add_listener(self, listener: ViewListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: ViewListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def view(self) -> AppView:
        state = self._engine.state
        return AppView(
            movies=tuple(state.movies),
            is_loading_initial=state.is_loading_initial,
            is_loading_more=state.is_loading_more,
            error_message=str(state.error) if state.status is QueryStatus.ERROR else None,
            has_more=state.has_next,
            trending=self._trending,
            search_text=self._debounce.raw,
            committed_term=state.term,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _on_commit(self, term: str) -> None:
        state = self._engine.state
        if term == state.term and state.status is not QueryStatus.IDLE:
            log.debug("committed_term_unchanged", term=term)
            return
        log.info("search_committed", term=term)
        self._spawn(self._engine.fetch_first(term))

    def _on_query_change(self, _state: QueryState) -> None:
        self._notify()

    def _notify(self) -> None:
        if not self._listeners:
            return
        view = self.view()
        for listener in list(self._listeners):
            listener(view)
