"""TMDB catalog client: async httpx implementation of MovieCatalogPort."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from moviescout.domain.entities.errors import CatalogMalformed, CatalogUnavailable
from moviescout.domain.entities.movie import FIRST_CURSOR, Movie, Page
from moviescout.domain.ports.search_count import SearchCountPort

log = structlog.get_logger(__name__)

_BASE_URL = "https://api.themoviedb.org/3"


class HttpxMovieCatalogClient:
    """Async TMDB client using httpx.

    Implements ``MovieCatalogPort`` from domain.ports.catalog. Every
    successful search page with at least one result is reported to the
    injected ``SearchCountPort`` (best effort).
    """

    def __init__(
        self,
        *,
        api_token: str,
        http_client: httpx.AsyncClient,
        search_counts: SearchCountPort | None = None,
        base_url: str = _BASE_URL,
    ) -> None:
        self._api_token = api_token
        self._http = http_client
        self._search_counts = search_counts
        self._base_url = base_url.rstrip("/")

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        return {
            "accept": "application/json",
            "Authorization": f"Bearer {self._api_token}",
        }

    @staticmethod
    def _endpoint(term: str, cursor: int) -> tuple[str, dict[str, Any]]:
        if term:
            return "/search/movie", {"query": term, "page": cursor}
        return "/discover/movie", {"sort_by": "popularity.desc", "page": cursor}

    async def _get(self, path: str, params: dict[str, Any]) -> Any:
        """GET request. Returns parsed JSON or raises CatalogUnavailable."""
        url = f"{self._base_url}{path}"
        try:
            resp = await self._http.get(url, params=params, headers=self._headers())
        except httpx.HTTPError as e:
            log.warning("catalog_network_error", path=path, error=str(e))
            raise CatalogUnavailable() from e

        if not resp.is_success:
            if resp.status_code == 401:
                log.error("catalog_token_invalid", status=401)
            else:
                log.warning("catalog_http_error", path=path, status=resp.status_code)
            raise CatalogUnavailable(status_code=resp.status_code)

        try:
            return resp.json()
        except ValueError as e:
            log.warning("catalog_invalid_json", path=path)
            raise CatalogMalformed("Catalog returned invalid JSON") from e

    @staticmethod
    def _parse_page(data: Any, cursor: int) -> Page:
        if not isinstance(data, dict):
            raise CatalogMalformed(f"Expected JSON object, got {type(data).__name__}")

        results = data.get("results")
        if results is None:
            results = []
        if not isinstance(results, list):
            raise CatalogMalformed("'results' is not a list")

        page = data.get("page", cursor)
        total_pages = data.get("total_pages", 0)
        if not isinstance(page, int) or not isinstance(total_pages, int):
            raise CatalogMalformed("'page' and 'total_pages' must be integers")

        return Page(
            movies=tuple(Movie.from_payload(item) for item in results),
            cursor=page,
            next_cursor=page + 1 if page < total_pages else None,
        )

    async def _report_search(self, term: str, page: Page) -> None:
        top = page.top_result
        if self._search_counts is None or not term or top is None:
            return
        try:
            await self._search_counts.record_search(term, top)
        except Exception:
            log.warning("search_count_update_failed", term=term, exc_info=True)

    # ------------------------------------------------------------------
    # Public API (MovieCatalogPort)
    # ------------------------------------------------------------------

    async def fetch(self, term: str, cursor: int = FIRST_CURSOR) -> Page:
        """Fetch one page of the popularity listing (empty *term*) or a search."""
        path, params = self._endpoint(term, cursor)
        log.debug("catalog_fetch", term=term, cursor=cursor)

        data = await self._get(path, params)
        page = self._parse_page(data, cursor)

        log.info(
            "catalog_page_fetched",
            term=term,
            cursor=page.cursor,
            results=len(page.movies),
            next_cursor=page.next_cursor,
        )
        await self._report_search(term, page)
        return page
