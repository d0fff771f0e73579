"""Action logger for lifecycle events.

This module provides a singleton logger for everything the resolver and the
invoker report: resolved definitions, dispatched requests, optimistic changes,
and rollbacks.

Logging strategy:
- Console (stderr): WARNING and above by default (rollbacks, bad registry
  entries), human readable; lower it with set_console_level()
- File (actions.jsonl): Only issues (WARNING, ERROR, CRITICAL) such as rollbacks

Records are structured dicts with an "event" key, e.g.:
    logger.warning({"event": "optimistic_reverted", "action": "like", ...})
"""

from __future__ import annotations

__all__ = [
    "ConsoleFormatter",
    "configure_action_logger_file",
    "get_action_logger",
    "set_console_level",
]

import logging
import sys
from pathlib import Path

from entity_actions.constants import APP_NAME
from entity_actions.utils.iso_formatter import ISO8601Formatter


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter for console output.

    Extracts 'message' or 'event' field from dict messages for cleaner stderr output.
    """

    def format(self, record: logging.LogRecord) -> str:
        if isinstance(record.msg, dict):
            msg = record.msg.get("message") or record.msg.get("event", "")
            action = record.msg.get("action")
            if action:
                return f"{record.levelname}: [{action}] {msg}"
            return f"{record.levelname}: {msg}"
        return f"{record.levelname}: {record.getMessage()}"


# Module-level singleton logger
_action_logger: logging.Logger | None = None
_file_handler: logging.FileHandler | None = None
_console_handler: logging.StreamHandler | None = None


def get_action_logger() -> logging.Logger:
    """Get the singleton action logger instance.

    Creates the logger on first call with a stderr handler only.
    File output is added later via configure_action_logger_file().

    Returns:
        logging.Logger: Configured action logger instance.
    """
    global _action_logger, _console_handler

    if _action_logger is not None:
        return _action_logger

    # DEBUG on the logger so a file or test handler can opt into resolution events
    _action_logger = logging.getLogger(f"{APP_NAME}.actions")
    _action_logger.setLevel(logging.DEBUG)
    _action_logger.propagate = False

    for handler in _action_logger.handlers:
        handler.close()
    _action_logger.handlers.clear()

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(ConsoleFormatter())
    _action_logger.addHandler(stderr_handler)
    _console_handler = stderr_handler

    return _action_logger


def configure_action_logger_file(log_path: Path, level: int = logging.WARNING) -> None:
    """Add a JSONL file handler to the action logger.

    Only the first call takes effect. The log directory is created if needed.

    Args:
        log_path: Path to the JSONL log file.
        level: Minimum level written to the file (default: WARNING).
    """
    global _file_handler

    if _file_handler is not None:
        return

    logger = get_action_logger()

    log_path.parent.mkdir(parents=True, exist_ok=True)

    _file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    _file_handler.setLevel(level)
    _file_handler.setFormatter(ISO8601Formatter())
    logger.addHandler(_file_handler)


def set_console_level(level: int) -> None:
    """Set the minimum level printed to stderr (default: WARNING).

    Args:
        level: A logging level, e.g. logging.INFO to see dispatched actions.
    """
    get_action_logger()
    assert _console_handler is not None  # Created by get_action_logger()
    _console_handler.setLevel(level)
