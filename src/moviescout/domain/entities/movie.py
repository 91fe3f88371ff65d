"""Domain entities for movie discovery.

Pure value objects with no framework dependencies and no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from itertools import chain
from typing import Any

from moviescout.domain.entities.errors import CatalogMalformed, MovieScoutError

POSTER_BASE_URL = "https://image.tmdb.org/t/p/w500"

# Cursors are 1-based page numbers.
FIRST_CURSOR = 1


def poster_url(poster_path: str | None, base_url: str = POSTER_BASE_URL) -> str:
    """Build an absolute poster URL. Empty string when no poster exists."""
    if not poster_path:
        return ""
    return f"{base_url}{poster_path}"


@dataclass(frozen=True)
class Movie:
    """A single catalog entry. Never mutated after it was fetched."""

    id: int
    title: str
    poster_path: str | None = None
    popularity: float = 0.0
    vote_average: float | None = None
    release_date: str = ""
    original_language: str = ""
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def poster_url(self) -> str:
        return poster_url(self.poster_path)

    @property
    def year(self) -> str | None:
        """Release year, e.g. ``"1999"``. None if the catalog has no date."""
        return self.release_date[:4] if len(self.release_date) >= 4 else None

    @classmethod
    def from_payload(cls, payload: Any) -> Movie:
        """Build a Movie from a raw catalog result object.

        Raises:
            CatalogMalformed: If the payload is not an object or lacks an id.
        """
        if not isinstance(payload, dict) or "id" not in payload:
            raise CatalogMalformed(f"Unexpected movie payload: {payload!r}")
        try:
            popularity = float(payload.get("popularity") or 0.0)
        except (TypeError, ValueError) as e:
            raise CatalogMalformed(f"Invalid popularity for movie {payload['id']}") from e
        return cls(
            id=payload["id"],
            title=payload.get("title") or payload.get("original_title") or "",
            poster_path=payload.get("poster_path"),
            popularity=popularity,
            vote_average=payload.get("vote_average"),
            release_date=payload.get("release_date") or "",
            original_language=payload.get("original_language") or "",
            raw=payload,
        )


@dataclass(frozen=True)
class Page:
    """One page of catalog results.

    ``next_cursor`` is None on the terminal page.
    """

    movies: tuple[Movie, ...]
    cursor: int = FIRST_CURSOR
    next_cursor: int | None = None

    @property
    def top_result(self) -> Movie | None:
        return self.movies[0] if self.movies else None


class QueryStatus(str, Enum):
    IDLE = "idle"
    FETCHING_FIRST = "fetching-first"
    FETCHING_NEXT = "fetching-next"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class QueryState:
    """Fetch state for one committed search term.

    Immutable snapshot: the query engine swaps in a new instance on every
    transition, callers only ever read it.
    """

    term: str = ""
    pages: tuple[Page, ...] = ()
    status: QueryStatus = QueryStatus.IDLE
    error: MovieScoutError | None = None
    next_cursor: int | None = None

    @property
    def movies(self) -> list[Movie]:
        return list(chain.from_iterable(page.movies for page in self.pages))

    @property
    def has_next(self) -> bool:
        return self.next_cursor is not None

    @property
    def is_fetching(self) -> bool:
        return self.status in (QueryStatus.FETCHING_FIRST, QueryStatus.FETCHING_NEXT)

    @property
    def is_loading_initial(self) -> bool:
        return self.status is QueryStatus.FETCHING_FIRST

    @property
    def is_loading_more(self) -> bool:
        return self.status is QueryStatus.FETCHING_NEXT

    def with_page(self, page: Page) -> QueryState:
        """Return a successful state with *page* appended."""
        return replace(
            self,
            pages=(*self.pages, page),
            status=QueryStatus.SUCCESS,
            error=None,
            next_cursor=page.next_cursor,
        )

    def with_error(self, error: MovieScoutError) -> QueryState:
        """Return an error state. Accumulated pages and cursor are kept."""
        return replace(self, status=QueryStatus.ERROR, error=error)


@dataclass(frozen=True)
class TrendingEntry:
    """Aggregate search popularity for one search term."""

    id: str
    search_term: str
    movie_id: int
    count: int
    poster_url: str = ""
    title: str = ""
