"""
Structured logging utilities with JSON formatting and context injection.

This module provides structured logging capabilities with:
- JSON formatted log output for machine-readable logs
- Context injection (source_path, stage, run_id) via LoggerAdapter
- Standardized log fields across all components
- Integration with Python's standard logging module
"""

import logging
import json
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, IO, Optional, MutableMapping
from logging import LogRecord

# Context fields promoted to the top level of every JSON record.
CONTEXT_FIELDS = ("source_path", "stage", "run_id")

_RESERVED_ATTRIBUTES = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info",
    "taskName",
}


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs log records as JSON with standard fields:
    - timestamp: ISO 8601 formatted timestamp
    - level: Log level (INFO, WARNING, ERROR, etc.)
    - logger: Logger name
    - message: Log message
    - source_path / stage / run_id: Pipeline context, when present
    - context: Any other extra fields
    - error: Error details (when exception info is attached)
    """

    def format(self, record: LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON formatted log string
        """
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        extra_fields = {}
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRIBUTES and key not in CONTEXT_FIELDS:
                extra_fields[key] = value

        if extra_fields:
            log_data["context"] = extra_fields

        if record.exc_info:
            log_data["error"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "stack_trace": "".join(traceback.format_exception(*record.exc_info))
            }

        log_data["source"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName
        }

        return json.dumps(log_data, default=str)


class LogContext:
    """
    Context manager for adding temporary context to logs.

    Usage:
        with LogContext(logger, source_path="main.lua", stage="parse"):
            logger.info("Parsing")  # Will include source_path and stage
    """

    def __init__(self, logger: logging.LoggerAdapter, **context: Any):
        self.logger = logger
        self.context = context
        self.old_extra = None

    def __enter__(self) -> logging.LoggerAdapter:
        """Enter context and add fields to logger."""
        self.old_extra = self.logger.extra.copy() if self.logger.extra else {}
        self.logger.extra.update(self.context)
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context and restore original logger state."""
        if self.old_extra is not None:
            self.logger.extra = self.old_extra


class ContextLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that injects context fields into all log records.
    """

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, extra or {})

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> tuple[str, MutableMapping[str, Any]]:
        """
        Process log message and inject context.

        Args:
            msg: Log message
            kwargs: Log kwargs

        Returns:
            Tuple of (message, kwargs) with context injected
        """
        extra = kwargs.get("extra", {})
        extra.update(self.extra)
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **context: Any) -> "ContextLoggerAdapter":
        """
        Create a new logger adapter with additional context.

        Args:
            **context: Additional context fields

        Returns:
            New logger adapter with merged context
        """
        new_extra = self.extra.copy()
        new_extra.update(context)
        return ContextLoggerAdapter(self.logger, new_extra)


def setup_logging(log_level: str = "WARNING", stream: Optional[IO[str]] = None) -> None:
    """
    Configure structured logging for the application.

    Sets up a JSON formatted stream handler on the root logger. Logs go to
    standard error by default so standard output stays free for user-facing
    messages.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        stream: Stream to write log records to (defaults to sys.stderr)
    """
    formatter = JSONFormatter()

    console_handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)


def get_logger(name: str, **context: Any) -> ContextLoggerAdapter:
    """
    Get a context-aware logger for a module.

    Args:
        name: Logger name (typically __name__)
        **context: Initial context fields (source_path, stage, run_id, etc.)

    Returns:
        Context logger adapter

    Example:
        logger = get_logger(__name__, source_path="main.lua")
        logger.info("Generating diagram")  # Will include source_path
    """
    base_logger = logging.getLogger(name)
    return ContextLoggerAdapter(base_logger, context)


def log_stage(
    logger: logging.LoggerAdapter,
    source_path: str,
    stage: str,
    status: str,
    **details: Any
) -> None:
    """
    Log a pipeline stage transition (start or completion).

    Args:
        logger: Logger to use
        source_path: Path of the source file being processed
        stage: Stage name ('parse', 'build', 'render', 'write')
        status: Status ('started' or 'completed')
        **details: Extra fields such as node or edge counts
    """
    extra = {
        "source_path": source_path,
        "stage": stage,
        "status": status,
    }
    extra.update(details)
    logger.info(f"Stage {status}: {stage}", extra=extra)


def log_error_with_context(
    logger: logging.LoggerAdapter,
    message: str,
    error: Exception,
    **context: Any
) -> None:
    """
    Log error with full stack trace and context.

    Args:
        logger: Logger to use
        message: Error message
        error: Exception object
        **context: Additional context fields
    """
    logger.error(
        message,
        extra=context,
        exc_info=(type(error), error, error.__traceback__)
    )
