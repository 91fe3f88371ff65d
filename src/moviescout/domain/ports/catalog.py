"""Port for the movie catalog."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from moviescout.domain.entities.movie import FIRST_CURSOR, Page


@runtime_checkable
class MovieCatalogPort(Protocol):
    """Async interface mapping (term, cursor) to one page of movies."""

    async def fetch(self, term: str, cursor: int = FIRST_CURSOR) -> Page:
        """Fetch one page.

        An empty *term* browses the popularity-sorted listing.

        Raises:
            CatalogUnavailable: Transport failure or non-success status.
            CatalogMalformed: Unexpected payload shape.
        """
        ...
