"""Layered configuration loading: defaults < YAML < env (.env) < CLI."""

from __future__ import annotations

from collections.abc import Iterator
from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

_SECTIONS: frozenset[str] = frozenset(
    {"tmdb", "http", "search", "logging", "cache", "search_counts"}
)

_TOP_LEVEL: tuple[str, ...] = ("app_name", "environment")

# Flat keys (env vars, CLI flags) and the section entry each one sets.
_FLAT_KEYS: dict[str, tuple[str, str]] = {
    "tmdb_api_token": ("tmdb", "api_token"),
    "tmdb_base_url": ("tmdb", "base_url"),
    "http_timeout_seconds": ("http", "timeout_seconds"),
    "http_user_agent": ("http", "user_agent"),
    "debounce_ms": ("search", "debounce_ms"),
    "trending_limit": ("search", "trending_limit"),
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
    "cache_backend": ("cache", "backend"),
    "cache_dir": ("cache", "dir"),
    "cache_redis_url": ("cache", "redis_url"),
    "search_count_ttl_days": ("search_counts", "ttl_days"),
}


def _merge_into(target: dict[str, Any], layer: Mapping[str, Any]) -> dict[str, Any]:
    """Merge *layer* into *target* in place; nested mappings merge, anything else replaces."""
    for key, value in layer.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _merge_into(current, value)
        else:
            target[key] = value
    return target


def _sectioned(layer: Mapping[str, Any]) -> dict[str, Any]:
    """Bring one layer into the sectioned shape used by config.yaml.

    Accepts both sectioned blocks (``{"http": {"timeout_seconds": 5}}``) and
    the flat keys in ``_FLAT_KEYS``; unknown keys are dropped.
    """
    out: dict[str, Any] = {
        section: dict(layer[section])
        for section in _SECTIONS
        if isinstance(layer.get(section), Mapping)
    }
    out.update({key: layer[key] for key in _TOP_LEVEL if key in layer})

    for flat_key, (section, entry) in _FLAT_KEYS.items():
        if flat_key in layer:
            out.setdefault(section, {})[entry] = layer[flat_key]
    return out


def _require_file(path: Path) -> Path:
    if not path.exists():
        raise FileNotFoundError(path)
    return path


def _read_yaml_config(config_path: Path) -> dict[str, Any]:
    parsed = yaml.safe_load(_require_file(config_path).read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"Config YAML must be a mapping, got: {type(parsed)!r}")
    return parsed


def _layers(
    config_path: Path | None, cli_overrides: Mapping[str, Any]
) -> Iterator[Mapping[str, Any]]:
    yield deepcopy(DEFAULT_CONFIG)
    if config_path is not None:
        yield _read_yaml_config(config_path)
    yield EnvOverrides().to_update_dict()
    yield cli_overrides


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """Build the validated AppConfig.

    Later layers win: defaults, then the YAML file, then ``MOVIESCOUT_*``
    environment variables (a ``.env`` file feeds this layer without
    overriding variables already set), then CLI overrides.

    Never creates files or directories.

    Raises:
        FileNotFoundError: If an explicit config or .env path does not exist.
        ValueError: If the YAML document is not a mapping.
        pydantic.ValidationError: If the merged values are invalid.
    """
    if dotenv_path is not None:
        load_dotenv(_require_file(dotenv_path), override=False)

    merged: dict[str, Any] = {}
    for layer in _layers(config_path, cli_overrides or {}):
        _merge_into(merged, _sectioned(layer))

    return AppConfig.model_validate(merged)
