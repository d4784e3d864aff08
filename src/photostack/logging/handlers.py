"""JSON log output for Photo Stack."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any


class JSONFormatter(logging.Formatter):
    """Format each record as one JSON object per line.

    Every entry has ts, level, logger and msg. Worker context set by
    WorkerContextFilter and the criteria fields passed through ``extra=``
    are added when present, followed by the formatted exception.

    Example:
        logger.error("Invalid regex", extra={"criteria_key": key, "pattern": p})
        # {"ts": "...", "level": "error", ..., "criteria_key": ..., "pattern": ...}
    """

    # Record attributes copied into the entry when not None
    context_fields: tuple[str, ...] = (
        "worker_id",
        "batch_id",
        "criteria_key",
        "pattern",
    )

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "ts": ts.isoformat(timespec="milliseconds"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }

        for name in self.context_fields:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value

        if record.exc_info:
            entry["error"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
