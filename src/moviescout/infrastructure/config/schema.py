"""Pydantic configuration models with validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]
CacheBackendName = Literal["diskcache", "redis"]


def _normalize_path(value: Any) -> Path:
    """
    Normalize a path-like value without causing filesystem side-effects.

    This function MUST NOT create directories or files.
    """
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    raise TypeError(f"Expected path-like value, got: {type(value)!r}")


class CacheConfig(BaseModel):
    """Storage backend for persisted search counts."""

    model_config = {"populate_by_name": True}

    backend: CacheBackendName = Field(
        default="diskcache",
        description="Backend: 'diskcache' (SQLite) or 'redis'",
    )
    directory: Path = Field(
        default=Path("./.cache/moviescout"),
        alias="dir",
        description="Diskcache SQLite DB path",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (only when backend=redis)",
    )
    max_concurrent: int = Field(
        default=10,
        description="Max parallel storage ops (semaphore limit)",
    )

    @field_validator("directory", mode="before")
    @classmethod
    def _validate_directory(cls, v: Any) -> Path:
        return _normalize_path(v)


class SearchConfig(BaseModel):
    """Search input, trending and infinite-scroll tuning."""

    debounce_ms: int = Field(
        default=500,
        description="Quiescence window before a search term is committed.",
    )
    trending_limit: int = Field(
        default=5,
        description="Number of trending entries loaded at startup.",
    )
    sentinel_threshold: float = Field(
        default=1.0,
        description="Visible ratio of the scroll sentinel that triggers the next page.",
    )

    @field_validator("debounce_ms")
    @classmethod
    def _validate_debounce(cls, v: int) -> int:
        if v < 0:
            raise ValueError("debounce_ms must be >= 0")
        return v

    @field_validator("trending_limit")
    @classmethod
    def _validate_trending_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("trending_limit must be >= 1")
        return v

    @field_validator("sentinel_threshold")
    @classmethod
    def _validate_threshold(cls, v: float) -> float:
        if not 0.0 < v <= 1.0:
            raise ValueError("sentinel_threshold must be within (0, 1]")
        return v

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (tmdb/http/search/logging/cache/search_counts).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="moviescout", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # Catalog API (YAML section: tmdb.*)
    tmdb_api_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "tmdb_api_token",
            AliasPath("tmdb", "api_token"),
        ),
        description="TMDB v4 read access token (sent as bearer credential).",
    )
    tmdb_base_url: str = Field(
        default="https://api.themoviedb.org/3",
        validation_alias=AliasChoices(
            "tmdb_base_url",
            AliasPath("tmdb", "base_url"),
        ),
        description="TMDB API base URL.",
    )
    tmdb_image_base_url: str = Field(
        default="https://image.tmdb.org/t/p/w500",
        validation_alias=AliasChoices(
            "tmdb_image_base_url",
            AliasPath("tmdb", "image_base_url"),
        ),
        description="Prefix for poster paths.",
    )

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="HTTP timeout in seconds for catalog requests.",
    )
    http_user_agent: str = Field(
        default="MovieScout/0.1.0",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # Search tuning (YAML section: search.*)
    search: SearchConfig = Field(default_factory=SearchConfig)

    # Search-count storage (YAML section: cache.*)
    cache: CacheConfig = Field(default_factory=CacheConfig)

    search_count_ttl_days: int = Field(
        default=365,
        validation_alias=AliasChoices(
            "search_count_ttl_days",
            AliasPath("search_counts", "ttl_days"),
        ),
        description="Days a search counter survives without being incremented.",
    )

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @field_validator("search_count_ttl_days")
    @classmethod
    def _validate_ttl(cls, v: int) -> int:
        if v < 0:
            raise ValueError("search_count_ttl_days must be >= 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.

        The API token is masked.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "tmdb": {
                "api_token": "***" if self.tmdb_api_token else None,
                "base_url": self.tmdb_base_url,
                "image_base_url": self.tmdb_image_base_url,
            },
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "user_agent": self.http_user_agent,
            },
            "search": self.search.model_dump(),
            "logging": {"level": self.log_level, "format": self.log_format},
            "cache": {
                "backend": self.cache.backend,
                "dir": str(self.cache.directory),
                "redis_url": self.cache.redis_url,
                "max_concurrent": self.cache.max_concurrent,
            },
            "search_counts": {"ttl_days": self.search_count_ttl_days},
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read MOVIESCOUT_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - MOVIESCOUT_TMDB_API_TOKEN
    - MOVIESCOUT_HTTP_TIMEOUT_SECONDS
    - MOVIESCOUT_DEBOUNCE_MS
    - MOVIESCOUT_LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_prefix="MOVIESCOUT_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    tmdb_api_token: Optional[str] = None
    tmdb_base_url: Optional[str] = None

    http_timeout_seconds: Optional[float] = None
    http_user_agent: Optional[str] = None

    debounce_ms: Optional[int] = None
    trending_limit: Optional[int] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    cache_backend: Optional[CacheBackendName] = None
    cache_dir: Optional[Path] = None
    cache_redis_url: Optional[str] = None

    search_count_ttl_days: Optional[int] = None

    @field_validator("cache_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Any:
        if v is None:
            return None
        return _normalize_path(v)

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
