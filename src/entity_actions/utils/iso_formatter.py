"""JSONL log formatting with ISO 8601 timestamps.

Used by the file handler of the action logger. Structured (dict) records are
written as-is, plain messages are wrapped in a "message" field.
"""

from __future__ import annotations

__all__ = ["ISO8601Formatter", "iso_timestamp"]

import json
import logging
from datetime import datetime, timezone


def iso_timestamp(created: float) -> str:
    """Render a record's creation time as YYYY-MM-DDTHH:MM:SS.sssZ (UTC)."""
    return (
        datetime.fromtimestamp(created, tz=timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


class ISO8601Formatter(logging.Formatter):
    """Formatter producing one JSON object per line.

    Example:
        {"time": "2025-12-04T10:48:37.123Z", "level": "WARNING", "event": "optimistic_reverted", ...}
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSONL.

        Args:
            record: The log record to format.

        Returns:
            str: JSON-encoded log entry with time and level first.
        """
        if isinstance(record.msg, dict):
            log_data = record.msg
        else:
            log_data = {"message": record.getMessage()}

        log_entry = {"time": iso_timestamp(record.created), "level": record.levelname, **log_data}
        if record.exc_info:
            log_entry["exc_info"] = self.formatException(record.exc_info)

        # Entity attribute values are arbitrary objects
        return json.dumps(log_entry, default=repr)
