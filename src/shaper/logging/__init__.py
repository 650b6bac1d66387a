"""Structured logging module for shaper.

Provides configurable logging with JSON format support and file rotation,
plus an editor context that tags records with the strategy being edited.
"""

from shaper.logging.config import configure_logging
from shaper.logging.context import (
    EditorContextFilter,
    clear_editor_context,
    editor_context,
    get_editor_context,
    set_editor_context,
)
from shaper.logging.handlers import JSONFormatter

__all__ = [
    "EditorContextFilter",
    "JSONFormatter",
    "clear_editor_context",
    "configure_logging",
    "editor_context",
    "get_editor_context",
    "set_editor_context",
]
