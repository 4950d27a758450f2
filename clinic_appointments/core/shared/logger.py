"""
Shared Logger

Console/file logging for the appointment workflow engine, plus
context-carrying loggers for per-operation workflow logs.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from clinic_appointments.config.settings import Settings

LOG_LINE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONTEXT_ATTR = "workflow_context"


class JSONFormatter(logging.Formatter):
    """One JSON object per record; workflow context goes under ``context``."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        context = getattr(record, CONTEXT_ATTR, None)
        if context:
            payload["context"] = context
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ColoredFormatter(logging.Formatter):
    """ANSI-colored level names for terminals."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        # Other handlers share the record, so the plain level name is restored.
        plain = record.levelname
        record.levelname = f"{self.COLORS.get(plain, self.RESET)}{plain}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = plain


class ContextLogger:
    """
    Wraps a stdlib logger and attaches a fixed context to each record.

    Keyword arguments given to a log call are merged over the fixed context
    for that record only.
    """

    def __init__(self, name: str, context: dict[str, Any] | None = None):
        self._logger = logging.getLogger(name)
        self._context = dict(context or {})

    @property
    def name(self) -> str:
        return self._logger.name

    @property
    def context(self) -> dict[str, Any]:
        return dict(self._context)

    def with_context(self, **kwargs) -> "ContextLogger":
        return ContextLogger(self.name, {**self._context, **kwargs})

    def _log(self, level: int, message: str, exc_info: bool = False, **kwargs) -> None:
        self._logger.log(level, message, exc_info=exc_info, extra={CONTEXT_ATTR: {**self._context, **kwargs}})

    def debug(self, message: str, **kwargs) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        self._log(logging.ERROR, message, **kwargs)

    def exception(self, message: str, **kwargs) -> None:
        """Log at ERROR with the active exception's traceback."""
        self._log(logging.ERROR, message, exc_info=True, **kwargs)


def _console_formatter(format_type: str) -> logging.Formatter:
    if format_type == "json":
        return JSONFormatter()
    if format_type == "colored":
        return ColoredFormatter(LOG_LINE_FORMAT, datefmt=LOG_DATE_FORMAT)
    return logging.Formatter(LOG_LINE_FORMAT, datefmt=LOG_DATE_FORMAT)


def configure_logging(
    level: str = "INFO",
    format_type: str = "colored",
    log_file: str | None = None,
    sql_echo: bool = False,
) -> None:
    """
    Replace the root handlers with a console handler and an optional JSON file handler.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: 'colored', 'json', or 'plain'
        log_file: Optional file path; the file is always written as JSON
        sql_echo: Keep SQLAlchemy engine logs at INFO instead of WARNING
    """
    log_level = logging.getLevelName(level.upper())
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    handlers[0].setFormatter(_console_formatter(format_type))
    if log_file:
        handlers.append(logging.FileHandler(log_file))
        handlers[1].setFormatter(JSONFormatter())

    for handler in handlers:
        handler.setLevel(log_level)
        root_logger.addHandler(handler)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if sql_echo else logging.WARNING)


def configure_logging_from_settings(settings: "Settings") -> None:
    """Apply LOG_LEVEL, LOG_FORMAT, LOG_FILE and DB_ECHO from settings."""
    configure_logging(
        level=settings.LOG_LEVEL,
        format_type=settings.LOG_FORMAT,
        log_file=settings.LOG_FILE,
        sql_echo=settings.DB_ECHO,
    )


def get_logger(name: str, context: dict[str, Any] | None = None) -> ContextLogger:
    return ContextLogger(name, context)


def get_workflow_logger(operation: str) -> ContextLogger:
    """Logger named ``workflow.<operation>`` carrying the operation in its context."""
    return get_logger(f"workflow.{operation}", {"component": "workflow", "operation": operation})
