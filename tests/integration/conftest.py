"""Shared fixtures for integration tests.

These tests use real infrastructure components (DiskcacheAdapter,
HttpxMovieCatalogClient, the session composition root) with mocked HTTP
via respx.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import respx

from moviescout.infrastructure.config import AppConfig, load_config


@pytest.fixture()
def respx_mock() -> respx.MockRouter:
    """Explicit respx mock router for request interception."""
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture()
def app_config(tmp_path: Path) -> AppConfig:
    """Validated config with a token, a tmp_path diskcache and a short debounce."""
    return load_config(
        cli_overrides={
            "tmdb_api_token": "integration-token",
            "cache_backend": "diskcache",
            "cache_dir": str(tmp_path / "cache"),
            "debounce_ms": 10,
        }
    )
