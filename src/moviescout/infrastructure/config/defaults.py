"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "moviescout",
    "environment": "dev",
    "tmdb": {
        "api_token": None,
        "base_url": "https://api.themoviedb.org/3",
        "image_base_url": "https://image.tmdb.org/t/p/w500",
    },
    "http": {
        "timeout_seconds": 10.0,
        "user_agent": "MovieScout/0.1.0",
    },
    "search": {
        "debounce_ms": 500,
        "trending_limit": 5,
        "sentinel_threshold": 1.0,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "cache": {
        "backend": "diskcache",
        "dir": "./.cache/moviescout",
        "redis_url": "redis://localhost:6379/0",
        "max_concurrent": 10,
    },
    "search_counts": {
        "ttl_days": 365,
    },
}
