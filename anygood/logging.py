"""
Structured event logging.

Loggers are obtained per component and emit an event name plus keyword
fields, e.g.:

    log = get_logger("core", "duplicates")
    log.info("duplicates.group.found", size=2, confidence=1.0)

Records go through the standard logging module under the
``anygood.<component>.<name>`` hierarchy, so handlers and levels are
configured the usual way.
"""

import logging
import sys
from typing import Any

ROOT_LOGGER_NAME = "anygood"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def _format_fields(fields: dict[str, Any]) -> str:
    return " ".join(f"{key}={value!r}" for key, value in fields.items())


class EventLogger:
    """Logger that takes an event name and keyword fields."""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    @property
    def name(self) -> str:
        return self._logger.name

    def _log(self, level: int, event: str, fields: dict[str, Any], exc_info: bool = False) -> None:
        if not self._logger.isEnabledFor(level):
            return
        message = f"{event} {_format_fields(fields)}" if fields else event
        self._logger.log(
            level,
            message,
            exc_info=exc_info,
            extra={"event": event, "fields": fields},
        )

    def debug(self, event: str, **fields: Any) -> None:
        self._log(logging.DEBUG, event, fields)

    def info(self, event: str, **fields: Any) -> None:
        self._log(logging.INFO, event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._log(logging.WARNING, event, fields)

    def error(self, event: str, **fields: Any) -> None:
        self._log(logging.ERROR, event, fields)

    def exception(self, event: str, **fields: Any) -> None:
        self._log(logging.ERROR, event, fields, exc_info=True)


def get_logger(component: str, name: str) -> EventLogger:
    """
    Get an event logger for a component.

    Args:
        component: Top-level area ("core", "cli", ...)
        name: Module-level name within the component ("parser", ...)
    """
    return EventLogger(logging.getLogger(f"{ROOT_LOGGER_NAME}.{component}.{name}"))


def configure_logging(level: str = "INFO") -> None:
    """Attach a console handler to the package root logger."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(_LEVELS.get(str(level).upper(), logging.INFO))

    if not any(getattr(h, "_anygood_console", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        ))
        handler._anygood_console = True
        root.addHandler(handler)
