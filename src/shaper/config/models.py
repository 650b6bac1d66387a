"""Configuration data models for shaper."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from shaper.metadata.models import MetadataEntry
from shaper.policy.catalog import (
    DEFAULT_CONDITION_FIELD,
    DEFAULT_STRATEGY_TYPE,
    MATCH_FIELDS,
    STRATEGY_TYPES,
)


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )
        if self.max_bytes <= 0:
            raise ValueError(f"max_bytes must be positive, got {self.max_bytes}")
        if self.backup_count < 0:
            raise ValueError(
                f"backup_count must not be negative, got {self.backup_count}"
            )


@dataclass
class EditorConfig:
    """Defaults applied when the editor creates new strategies and conditions."""

    default_strategy_type: str = DEFAULT_STRATEGY_TYPE
    default_condition_field: str = DEFAULT_CONDITION_FIELD

    def __post_init__(self) -> None:
        if self.default_strategy_type not in STRATEGY_TYPES:
            raise ValueError(
                f"default_strategy_type must be one of {sorted(STRATEGY_TYPES)}, "
                f"got {self.default_strategy_type}"
            )
        fields = [f.value for f in MATCH_FIELDS]
        if self.default_condition_field not in fields:
            raise ValueError(
                f"default_condition_field must be one of {fields}, "
                f"got {self.default_condition_field}"
            )


@dataclass
class ShaperConfig:
    """Main configuration for shaper.

    Attributes:
        logging: Logging settings.
        editor: Editor defaults.
        metadata: Extra metadata entries added to the built-in directory.
    """

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    editor: EditorConfig = field(default_factory=EditorConfig)
    metadata: tuple[MetadataEntry, ...] = ()
