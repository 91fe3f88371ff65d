"""Error taxonomy for catalog and search-count collaborators."""

from __future__ import annotations


class MovieScoutError(Exception):
    """Base error for moviescout domain/usecases."""


class CatalogUnavailable(MovieScoutError):
    """Transport failure or non-success HTTP status from the catalog API."""

    def __init__(
        self, message: str = "Failed to fetch movies", *, status_code: int | None = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code


class CatalogMalformed(CatalogUnavailable):
    """Catalog answered, but the payload does not have the expected shape."""


class CountServiceFailure(MovieScoutError):
    """Search-count backend failed. Always isolated, never user-visible."""
