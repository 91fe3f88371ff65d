"""Plain-text rendering of an AppView for the terminal."""

from __future__ import annotations

from moviescout.application.app_controller import AppView
from moviescout.domain.entities.movie import Movie, TrendingEntry


def format_movie(movie: Movie) -> str:
    """One line per movie: title, rating, language, year."""
    rating = f"{movie.vote_average:.1f}" if movie.vote_average else "N/A"
    language = movie.original_language or "N/A"
    year = movie.year or "N/A"
    return f"{movie.title} | {rating} | {language} | {year}"


def format_trending(position: int, entry: TrendingEntry) -> str:
    label = f"{entry.search_term} -> {entry.title}" if entry.title else entry.search_term
    return f"{position}. {label} ({entry.count})"


def render_trending(trending: tuple[TrendingEntry, ...]) -> str:
    if not trending:
        return "No trending movies yet"
    lines = ["Trending Movies"]
    lines.extend(format_trending(i, entry) for i, entry in enumerate(trending, start=1))
    return "\n".join(lines)


def render_view(view: AppView) -> str:
    lines: list[str] = []

    if view.trending:
        lines.extend([render_trending(view.trending), ""])

    heading = f'Results for "{view.committed_term}"' if view.committed_term else "All Movies"
    lines.append(heading)

    if view.is_loading_initial:
        lines.append("Loading...")
    elif view.error_message and not view.movies:
        lines.append(f"Error: {view.error_message}")
    else:
        lines.extend(f"- {format_movie(movie)}" for movie in view.movies)
        if view.error_message:
            lines.append(f"Error: {view.error_message}")

    if view.is_loading_more:
        lines.append("Loading more...")
    elif not view.has_more and not view.is_loading_initial:
        lines.append("No more movies")

    return "\n".join(lines)
