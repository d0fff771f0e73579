"""Telemetry for entity-actions.

- action_logger: Singleton structured logger for action lifecycle events
"""

from entity_actions.telemetry.action_logger import (
    ConsoleFormatter,
    configure_action_logger_file,
    get_action_logger,
    set_console_level,
)

__all__ = [
    "ConsoleFormatter",
    "configure_action_logger_file",
    "get_action_logger",
    "set_console_level",
]
