"""Logging setup for the shaper package.

Handlers are installed on the ``shaper`` logger rather than the root
logger, so an application embedding the editor keeps its own logging
setup. Records still propagate to the root logger.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from shaper.logging.context import EditorContextFilter
from shaper.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from shaper.config.models import LoggingConfig

PACKAGE_LOGGER = "shaper"

# strategy_tag is "[S:example_1] " inside editor_context(), else empty
TEXT_FORMAT = "%(asctime)s - %(strategy_tag)s%(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

# Handlers added by the last configure_logging() call
_installed: list[logging.Handler] = []


def _formatter(log_format: str) -> logging.Formatter:
    if log_format.casefold() == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)


def _file_handler(config: LoggingConfig) -> logging.Handler | None:
    """Open the rotating log file, or return None when it cannot be opened."""
    path = Path(config.file).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"Warning: Could not open log file {path}: {e}\n")
        return None


def configure_logging(config: LoggingConfig) -> logging.Logger:
    """Send shaper's log records to a file and/or stderr.

    Calling this again replaces the handlers from the previous call and
    leaves any other handler on the ``shaper`` logger alone. stderr is used
    when ``include_stderr`` is set, when no file is configured, and when the
    file cannot be opened.

    Args:
        config: Logging configuration.

    Returns:
        The configured ``shaper`` logger.
    """
    level = logging.getLevelNamesMapping()[config.level.upper()]
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for handler in _installed:
        logger.removeHandler(handler)
        handler.close()
    _installed.clear()

    handlers: list[logging.Handler] = []
    file_handler = _file_handler(config) if config.file else None
    if file_handler is not None:
        handlers.append(file_handler)
    if config.include_stderr or file_handler is None:
        handlers.append(logging.StreamHandler(sys.stderr))

    formatter = _formatter(config.format)
    context_filter = EditorContextFilter()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        logger.addHandler(handler)
        _installed.append(handler)

    return logger
