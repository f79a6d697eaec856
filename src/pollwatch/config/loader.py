"""Configuration file loading and caching.

Handles:
- YAML file parsing
- Environment variable overrides
- Section-wise merging of partial configs
- Conversion from dict to typed Config dataclass
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from pollwatch.config.paths import get_config_paths
from pollwatch.config.schema import DEFAULT_INTERVAL, Config, LoggingConfig, WatchConfig

# Module logger (may not be configured yet at import time)
_log = logging.getLogger("pollwatch.config")

_cached_config: Config | None = None


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning empty dict if not found or invalid."""
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except yaml.YAMLError as e:
        _log.warning("Invalid YAML in %s: %s", path, e)
        return {}
    except PermissionError:
        _log.debug("Permission denied reading %s", path)
        return {}
    except OSError as e:
        _log.warning("Error reading %s: %s", path, e)
        return {}


def env_overrides() -> dict[str, Any]:
    """Build a config dict from POLLWATCH_* environment variables."""
    overrides: dict[str, Any] = {}

    interval = os.environ.get("POLLWATCH_INTERVAL")
    if interval:
        try:
            overrides.setdefault("watch", {})["interval"] = float(interval)
        except ValueError:
            _log.warning("Ignoring non-numeric POLLWATCH_INTERVAL=%r", interval)

    log_path = os.environ.get("POLLWATCH_LOG")
    if log_path:
        overrides.setdefault("logging", {})["file"] = log_path

    log_level = os.environ.get("POLLWATCH_LOG_LEVEL")
    if log_level:
        overrides.setdefault("logging", {})["level"] = log_level

    return overrides


def merge_sections(*layers: dict[str, Any]) -> dict[str, Any]:
    """Merge config dicts in order, later layers winning.

    Nested dicts merge key by key, lists are replaced whole and None never
    overrides an existing value.
    """
    merged: dict[str, Any] = {}
    for layer in layers:
        for key, value in (layer or {}).items():
            if value is None:
                continue
            current = merged.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                merged[key] = merge_sections(current, value)
            else:
                merged[key] = value
    return merged


def _as_patterns(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value if v]


def dict_to_config(data: dict[str, Any]) -> Config:
    """Convert a merged dict to the typed Config dataclass."""
    watch_data = data.get("watch") or {}
    try:
        interval = float(watch_data.get("interval", DEFAULT_INTERVAL))
    except (TypeError, ValueError):
        _log.warning("Invalid watch.interval %r, using default", watch_data.get("interval"))
        interval = DEFAULT_INTERVAL
    watch = WatchConfig(
        interval=interval,
        exclude=_as_patterns(watch_data.get("exclude")),
        dontwait=bool(watch_data.get("dontwait", False)),
        spinner=bool(watch_data.get("spinner", False)),
    )

    log_data = data.get("logging") or {}
    verbose = log_data.get("verbose")
    logging_config = LoggingConfig(
        level=log_data.get("level"),
        verbose=int(verbose) if verbose is not None else None,
        file=log_data.get("file"),
    )

    known_keys = {"watch", "logging"}
    extra = {k: v for k, v in data.items() if k not in known_keys}

    return Config(watch=watch, logging=logging_config, extra=extra)


def load_config(
    root: str | Path | None = None,
    reload: bool = False,
    extra_files: Iterable[Path] = (),
) -> Config:
    """Load and merge config from all sources.

    Priority order (highest to lowest):
    1. Environment variables
    2. Files passed in ``extra_files`` (e.g. ``--config``)
    3. Project config ($root/.pollwatch.yaml)
    4. User config
    5. System config

    Only the plain global config (no root, no extra files) is cached.
    """
    global _cached_config

    extra_files = list(extra_files)
    cacheable = root is None and not extra_files

    if _cached_config is not None and cacheable and not reload:
        return _cached_config

    layers: list[dict[str, Any]] = []
    for path in [*get_config_paths(root), *extra_files]:
        data = load_yaml_file(path)
        if data:
            _log.debug("Loaded config from %s", path)
            layers.append(data)

    layers.append(env_overrides())

    config = dict_to_config(merge_sections(*layers))

    if cacheable:
        _cached_config = config

    return config


def get_config() -> Config:
    """Get the cached global config, loading it on first use."""
    if _cached_config is None:
        return load_config()
    return _cached_config


def reset_config() -> None:
    """Reset cached config. Useful for testing or forcing a reload."""
    global _cached_config
    _cached_config = None
