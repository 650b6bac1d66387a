"""JSON log output for shaper."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries, plus those Formatter.format() adds
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

# Set by EditorContextFilter; strategy_id is emitted as a top-level key
_EDITOR_ATTRS = frozenset({"strategy_id", "strategy_tag"})


class JSONFormatter(logging.Formatter):
    """Format each record as one JSON object.

    Keys:
    - timestamp: ISO-8601 UTC
    - level, logger, message
    - strategy_id: the strategy the record concerns, when there is one
    - context: remaining ``extra=`` fields (e.g. ``count``, ``policy_file``)
    - exception: formatted traceback, when attached

    Non-ASCII text such as Chinese strategy descriptions is written verbatim.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        strategy_id = getattr(record, "strategy_id", None)
        if strategy_id:
            entry["strategy_id"] = strategy_id

        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS
            and key not in _EDITOR_ATTRS
            and not key.startswith("_")
        }
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)
