"""Editor context for structured logging.

Uses contextvars so the id of the strategy being edited is attached to
every log record emitted while it is open, without passing it through
each call.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_strategy_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "strategy_id", default=None
)


def set_editor_context(strategy_id: str) -> None:
    """Mark ``strategy_id`` as the strategy being edited."""
    _strategy_id.set(strategy_id)


def clear_editor_context() -> None:
    _strategy_id.set(None)


def get_editor_context() -> str | None:
    """Return the id of the strategy being edited, or None."""
    return _strategy_id.get()


@contextmanager
def editor_context(strategy_id: str) -> Generator[None, None, None]:
    """Context manager scoping log records to one strategy.

    The previous context is restored on exit, so contexts can nest.

    Example:
        with editor_context("example_1"):
            logger.info("Saving")  # record carries strategy_id
    """
    token = _strategy_id.set(strategy_id)
    try:
        yield
    finally:
        _strategy_id.reset(token)


class EditorContextFilter(logging.Filter):
    """Logging filter that injects the editor context into log records.

    Adds ``strategy_id`` for JSON output and a compact ``strategy_tag``
    (``"[S:example_1] "`` or empty) for the text format.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        strategy_id = get_editor_context()
        # extra={"strategy_id": ...} on the call wins over the context
        if getattr(record, "strategy_id", None) is None:
            record.strategy_id = strategy_id
        record.strategy_tag = f"[S:{strategy_id}] " if strategy_id else ""
        return True
