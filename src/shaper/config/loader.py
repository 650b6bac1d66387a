"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to functions)
2. Environment variables (SHAPER_*)
3. Config file (~/.shaper/config.toml)
4. Default values

Environment variables:
- SHAPER_LOG_LEVEL: Log level (debug, info, warning, error)
- SHAPER_LOG_FILE: Log file path
- SHAPER_LOG_FORMAT: Log format (text, json)
- SHAPER_DEFAULT_STRATEGY_TYPE: Strategy type of newly created strategies
- SHAPER_CONFIG_PATH: Path to config file (overrides default location)
- SHAPER_DATA_DIR: Path to shaper data directory (overrides ~/.shaper/)
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from shaper.config.env import EnvReader
from shaper.config.models import EditorConfig, LoggingConfig, ShaperConfig
from shaper.core.ids import generate_id
from shaper.metadata.models import MetadataCategory, MetadataEntry

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".shaper"
CONFIG_FILE_NAME = "config.toml"

# path -> (parsed dict, mtime); reloaded when the file changes
_config_cache: dict[Path, tuple[dict[str, Any], float]] = {}


class ConfigError(Exception):
    """Raised for an unreadable or invalid config file in strict mode."""


def get_data_dir(env_reader: EnvReader | None = None) -> Path:
    """Get the shaper data directory.

    Can be overridden by the SHAPER_DATA_DIR environment variable.

    Returns:
        Path to the data directory (~/.shaper/ by default).
    """
    reader = env_reader or EnvReader()
    return reader.get_path("SHAPER_DATA_DIR", default=DEFAULT_CONFIG_DIR)


def get_default_config_path(env_reader: EnvReader | None = None) -> Path:
    """Get the default config file path.

    SHAPER_CONFIG_PATH wins; otherwise config.toml inside the data directory.
    """
    reader = env_reader or EnvReader()
    env_path = reader.get_path("SHAPER_CONFIG_PATH")
    if env_path is not None:
        return env_path
    return get_data_dir(reader) / CONFIG_FILE_NAME


def _parse_config(path: Path, strict: bool) -> dict[str, Any]:
    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}
    try:
        with path.open("rb") as f:
            config = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        if strict:
            raise ConfigError(f"Failed to load config file {path}: {e}") from e
        logger.warning("Failed to load config file %s: %s", path, e)
        return {}
    logger.debug("Loaded config from %s", path)
    return config


def load_config_file(path: Path | None = None, *, strict: bool = False) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Results are cached and reloaded when the file's mtime changes. Use
    clear_config_cache() to force a reload.

    Args:
        path: Path to config file. If None, uses default location.
        strict: If True, raise ConfigError on parse failures instead of
            returning an empty dict.

    Returns:
        Parsed configuration dict. Empty dict if file doesn't exist.
    """
    if path is None:
        path = get_default_config_path()

    try:
        current_mtime = path.stat().st_mtime
    except FileNotFoundError:
        current_mtime = 0.0

    cached = _config_cache.get(path)
    if cached is not None and cached[1] == current_mtime:
        return cached[0]

    result = _parse_config(path, strict)
    _config_cache[path] = (result, current_mtime)
    return result


def clear_config_cache() -> None:
    """Clear the config file cache. Primarily useful for testing."""
    _config_cache.clear()


def _section(file_config: dict[str, Any], name: str) -> dict[str, Any]:
    section = file_config.get(name, {})
    return section if isinstance(section, dict) else {}


def _metadata_entries(
    tables: Any, *, strict: bool
) -> tuple[MetadataEntry, ...]:
    if not isinstance(tables, list):
        return ()
    entries: list[MetadataEntry] = []
    for idx, table in enumerate(tables):
        try:
            category = MetadataCategory(str(table["category"]))
            label = str(table["label"]).strip()
            value = str(table["value"]).strip()
            if not label or not value:
                raise ValueError("label and value must not be blank")
        except (KeyError, TypeError, ValueError) as e:
            if strict:
                raise ConfigError(f"Invalid [[metadata]] entry {idx}: {e}") from e
            logger.warning("Skipping invalid [[metadata]] entry %d: %s", idx, e)
            continue
        entries.append(
            MetadataEntry(
                id=generate_id(category.value),
                category=category,
                label=label,
                value=value,
            )
        )
    return tuple(entries)


def get_config(
    config_path: Path | None = None,
    # CLI overrides (highest precedence)
    log_level: str | None = None,
    log_file: Path | None = None,
    log_format: str | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> ShaperConfig:
    """Get shaper configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides SHAPER_CONFIG_PATH).
        log_level: CLI override for the log level.
        log_file: CLI override for the log file.
        log_format: CLI override for the log format.
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: If True, raise ConfigError for an unparseable file or an
            invalid [[metadata]] entry.

    Returns:
        ShaperConfig with merged configuration.

    Raises:
        ValueError: If a merged logging or editor value is invalid.
    """
    reader = env_reader or EnvReader()
    path = config_path or get_default_config_path(reader)
    file_config = load_config_file(path, strict=strict)

    log_section = _section(file_config, "logging")
    editor_section = _section(file_config, "editor")

    file_log_path = log_section.get("file")
    logging_config = LoggingConfig(
        level=(
            log_level
            or reader.get_str("SHAPER_LOG_LEVEL")
            or log_section.get("level", "info")
        ),
        file=(
            log_file
            or reader.get_path("SHAPER_LOG_FILE")
            or (Path(file_log_path).expanduser() if file_log_path else None)
        ),
        format=(
            log_format
            or reader.get_str("SHAPER_LOG_FORMAT")
            or log_section.get("format", "text")
        ),
        include_stderr=bool(log_section.get("include_stderr", False)),
        max_bytes=int(log_section.get("max_bytes", 10_485_760)),
        backup_count=int(log_section.get("backup_count", 5)),
    )

    defaults = EditorConfig()
    editor_config = EditorConfig(
        default_strategy_type=(
            reader.get_str("SHAPER_DEFAULT_STRATEGY_TYPE")
            or editor_section.get(
                "default_strategy_type", defaults.default_strategy_type
            )
        ),
        default_condition_field=editor_section.get(
            "default_condition_field", defaults.default_condition_field
        ),
    )

    return ShaperConfig(
        logging=logging_config,
        editor=editor_config,
        metadata=_metadata_entries(file_config.get("metadata"), strict=strict),
    )
