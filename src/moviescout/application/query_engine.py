"""Cursor-paginated query state for the committed search term.

The engine owns exactly one live ``QueryState``. ``fetch_first`` re-keys it
to a term and restarts from cursor 1, ``fetch_next`` appends the next page.
Every request is tagged with the generation it was issued for; a response
that arrives after the state was re-keyed is dropped without touching
state. Superseded requests are not cancelled, only ignored; ``aclose``
cancels whatever is still in flight.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import structlog

from moviescout.domain.entities.errors import CatalogUnavailable
from moviescout.domain.entities.movie import FIRST_CURSOR, Page, QueryState, QueryStatus
from moviescout.domain.ports.catalog import MovieCatalogPort

log = structlog.get_logger(__name__)

StateListener = Callable[[QueryState], None]

_RequestKey = tuple[str, int]


class PaginatedQueryEngine:
    """Owns the paginated fetch state for one committed term at a time.

    Thread-safety note: not thread-safe; safe for single-threaded asyncio
    because state is only replaced between awaits.
    """

    def __init__(
        self,
        catalog: MovieCatalogPort,
        *,
        on_change: StateListener | None = None,
    ) -> None:
        self._catalog = catalog
        self._on_change = on_change
        self._state = QueryState()
        self._generation = 0
        self._inflight: dict[_RequestKey, asyncio.Task[Page]] = {}

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def state(self) -> QueryState:
        return self._state

    @property
    def term(self) -> str:
        return self._state.term

    @property
    def has_next(self) -> bool:
        return self._state.has_next

    @property
    def is_fetching(self) -> bool:
        return self._state.is_fetching

    @property
    def inflight_count(self) -> int:
        return len(self._inflight)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def fetch_first(self, term: str) -> None:
        """Reset state for *term* and load its first page.

        A call for the term whose first page is already loading joins that
        request instead of issuing a second one.
        """
        if self._state.term == term and self._state.is_loading_initial:
            log.debug("fetch_first_coalesced", term=term)
            await self._join((term, FIRST_CURSOR))
            return

        self._generation += 1
        self._set_state(QueryState(term=term, status=QueryStatus.FETCHING_FIRST))
        await self._run(term, FIRST_CURSOR, self._generation)

    async def fetch_next(self) -> None:
        """Load the page after the most recent one.

        No-op when there is no next cursor or a fetch is already in flight.
        """
        state = self._state
        if state.next_cursor is None or state.is_fetching:
            log.debug(
                "fetch_next_skipped",
                term=state.term,
                has_next=state.has_next,
                status=state.status.value,
            )
            return

        self._set_state(
            QueryState(
                term=state.term,
                pages=state.pages,
                status=QueryStatus.FETCHING_NEXT,
                error=None,
                next_cursor=state.next_cursor,
            )
        )
        await self._run(state.term, state.next_cursor, self._generation)

    async def aclose(self) -> None:
        """Cancel every in-flight catalog request and wait for it to finish."""
        tasks = list(self._inflight.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            log.debug("catalog_requests_cancelled", count=len(tasks))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _set_state(self, state: QueryState) -> None:
        self._state = state
        if self._on_change is not None:
            self._on_change(state)

    def _request(self, key: _RequestKey) -> asyncio.Task[Page]:
        """Return the in-flight task for *key*, starting one if needed."""
        task = self._inflight.get(key)
        if task is not None:
            log.debug("catalog_request_reused", term=key[0], cursor=key[1])
            return task

        term, cursor = key
        task = asyncio.get_running_loop().create_task(self._catalog.fetch(term, cursor))
        self._inflight[key] = task

        def _done(t: asyncio.Task[Page], key: _RequestKey = key) -> None:
            if self._inflight.get(key) is t:
                del self._inflight[key]
            if not t.cancelled():
                t.exception()  # mark retrieved; awaiting callers re-raise it

        task.add_done_callback(_done)
        return task

    async def _join(self, key: _RequestKey) -> None:
        task = self._inflight.get(key)
        if task is None:
            return
        try:
            await asyncio.shield(task)
        except CatalogUnavailable:
            # The issuing caller records the error.
            pass

    async def _run(self, term: str, cursor: int, generation: int) -> None:
        task = self._request((term, cursor))
        try:
            page = await asyncio.shield(task)
        except CatalogUnavailable as e:
            if self._is_stale(term, generation):
                log.debug("stale_error_dropped", term=term, cursor=cursor)
                return
            log.warning(
                "query_fetch_failed",
                term=term,
                cursor=cursor,
                status_code=e.status_code,
                error=str(e),
            )
            self._set_state(self._state.with_error(e))
            return

        if self._is_stale(term, generation):
            log.debug("stale_response_dropped", term=term, cursor=cursor)
            return

        self._set_state(self._state.with_page(page))
        log.debug(
            "query_page_applied",
            term=term,
            cursor=cursor,
            pages=len(self._state.pages),
            has_next=self._state.has_next,
        )

    def _is_stale(self, term: str, generation: int) -> bool:
        return generation != self._generation or term != self._state.term
