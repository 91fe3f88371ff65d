from .errors import (
    CatalogMalformed,
    CatalogUnavailable,
    CountServiceFailure,
    MovieScoutError,
)
from .movie import (
    FIRST_CURSOR,
    Movie,
    Page,
    QueryState,
    QueryStatus,
    TrendingEntry,
    poster_url,
)

__all__ = [
    "FIRST_CURSOR",
    "CatalogMalformed",
    "CatalogUnavailable",
    "CountServiceFailure",
    "Movie",
    "MovieScoutError",
    "Page",
    "QueryState",
    "QueryStatus",
    "TrendingEntry",
    "poster_url",
]
