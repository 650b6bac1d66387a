"""Configuration management for shaper.

Configuration is loaded with precedence handling:
1. CLI flags (highest priority)
2. Environment variables (SHAPER_*)
3. Config file (~/.shaper/config.toml)
4. Default values (lowest priority)
"""

from shaper.config.env import EnvReader
from shaper.config.loader import (
    ConfigError,
    clear_config_cache,
    get_config,
    get_data_dir,
    get_default_config_path,
    load_config_file,
)
from shaper.config.models import EditorConfig, LoggingConfig, ShaperConfig

__all__ = [
    "ConfigError",
    "EditorConfig",
    "EnvReader",
    "LoggingConfig",
    "ShaperConfig",
    "clear_config_cache",
    "get_config",
    "get_data_dir",
    "get_default_config_path",
    "load_config_file",
]
