"""Configuration management for pollwatch.

Provides hierarchical YAML-based configuration with:
- System-level config (/etc/pollwatch/ or %PROGRAMDATA%)
- User-level config (~/.config/pollwatch/ or %APPDATA%)
- Project-level config ($root/.pollwatch.yaml)
- Environment variable overrides (highest priority)

Example usage:
    from pollwatch.config import load_config

    config = load_config(root="/path/to/project")
    print(config.watch.interval)
"""

from pollwatch.config.loader import (
    dict_to_config,
    get_config,
    load_config,
    load_yaml_file,
    reset_config,
)
from pollwatch.config.paths import (
    get_config_paths,
    get_project_config_path,
    get_system_config_path,
    get_user_config_path,
)
from pollwatch.config.schema import (
    DEFAULT_INTERVAL,
    Config,
    LoggingConfig,
    WatchConfig,
)

__all__ = [
    # Main API
    "Config",
    "load_config",
    "get_config",
    "reset_config",
    "load_yaml_file",
    "dict_to_config",
    # Schema types
    "WatchConfig",
    "LoggingConfig",
    "DEFAULT_INTERVAL",
    # Path utilities
    "get_config_paths",
    "get_system_config_path",
    "get_user_config_path",
    "get_project_config_path",
]
