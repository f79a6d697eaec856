"""Configuration schema dataclasses for pollwatch.

All fields have defaults so partial configs (system, user, project) can be
merged together before conversion.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DEFAULT_INTERVAL = 0.5


@dataclass
class WatchConfig:
    """Options recognised by FileWatcher.

    Example .pollwatch.yaml:
        watch:
          interval: 0.2
          dontwait: true
          exclude:
            - "build/**"
            - "*.tmp"
    """

    interval: float = DEFAULT_INTERVAL  # Seconds between polls
    exclude: list[str] = field(default_factory=list)  # Patterns subtracted from the watch set
    dontwait: bool = False  # Fire one synthetic event before the first poll
    spinner: bool = False  # Show a terminal progress indicator


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str | None = None  # DEBUG, INFO, WARNING, ERROR
    verbose: int | None = None  # 0-4, overrides level
    file: str | None = None  # Log file path


@dataclass
class Config:
    """Root configuration object."""

    watch: WatchConfig = field(default_factory=WatchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)  # Unknown top-level keys
