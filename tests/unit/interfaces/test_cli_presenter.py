"""Tests for the terminal presenter."""

from __future__ import annotations

from moviescout.application.app_controller import AppView
from moviescout.domain.entities.movie import Movie, TrendingEntry
from moviescout.interfaces.cli.presenter import (
    format_movie,
    format_trending,
    render_trending,
    render_view,
)


def _view(**overrides) -> AppView:
    values = {
        "movies": (),
        "is_loading_initial": False,
        "is_loading_more": False,
        "error_message": None,
        "has_more": False,
        "trending": (),
    }
    values.update(overrides)
    return AppView(**values)


class TestFormatMovie:
    def test_full_movie(self, movie: Movie) -> None:
        assert format_movie(movie) == "The Matrix | 7.5 | en | 1999"

    def test_missing_fields(self) -> None:
        m = Movie.from_payload({"id": 1, "title": "Unknown"})
        assert format_movie(m) == "Unknown | N/A | N/A | N/A"

    def test_zero_rating_is_na(self) -> None:
        m = Movie.from_payload({"id": 1, "title": "New", "vote_average": 0})
        assert format_movie(m).startswith("New | N/A")


class TestTrending:
    def test_format_entry(self, trending_entries: list[TrendingEntry]) -> None:
        assert format_trending(1, trending_entries[0]) == "1. matrix -> The Matrix (7)"

    def test_entry_without_title(self) -> None:
        entry = TrendingEntry(id="x", search_term="heat", movie_id=949, count=2)
        assert format_trending(3, entry) == "3. heat (2)"

    def test_render_list(self, trending_entries: list[TrendingEntry]) -> None:
        out = render_trending(tuple(trending_entries))
        assert out.splitlines() == [
            "Trending Movies",
            "1. matrix -> The Matrix (7)",
            "2. alien -> Alien (3)",
        ]

    def test_render_empty(self) -> None:
        assert render_trending(()) == "No trending movies yet"


class TestRenderView:
    def test_browse_heading(self, movie: Movie) -> None:
        out = render_view(_view(movies=(movie,)))
        lines = out.splitlines()
        assert lines[0] == "All Movies"
        assert "- The Matrix | 7.5 | en | 1999" in lines
        assert lines[-1] == "No more movies"

    def test_search_heading(self) -> None:
        out = render_view(_view(committed_term="batman"))
        assert out.splitlines()[0] == 'Results for "batman"'

    def test_initial_loading(self) -> None:
        out = render_view(_view(is_loading_initial=True))
        assert "Loading..." in out
        assert "No more movies" not in out

    def test_loading_more(self, movie: Movie) -> None:
        out = render_view(_view(movies=(movie,), is_loading_more=True, has_more=True))
        assert out.splitlines()[-1] == "Loading more..."

    def test_has_more_hides_end_marker(self, movie: Movie) -> None:
        out = render_view(_view(movies=(movie,), has_more=True))
        assert "No more movies" not in out

    def test_error_without_movies(self) -> None:
        out = render_view(_view(error_message="Failed to fetch movies"))
        assert "Error: Failed to fetch movies" in out

    def test_error_keeps_loaded_movies(self, movie: Movie) -> None:
        out = render_view(
            _view(movies=(movie,), error_message="Failed to fetch movies", has_more=True)
        )
        lines = out.splitlines()
        assert "- The Matrix | 7.5 | en | 1999" in lines
        assert "Error: Failed to fetch movies" in lines

    def test_trending_block_first(
        self, movie: Movie, trending_entries: list[TrendingEntry]
    ) -> None:
        out = render_view(_view(movies=(movie,), trending=tuple(trending_entries)))
        lines = out.splitlines()
        assert lines[0] == "Trending Movies"
        assert "All Movies" in lines
