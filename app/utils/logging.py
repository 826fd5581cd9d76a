"""
Structured logging utilities with JSON formatting and context injection.

This module provides structured logging capabilities with:
- JSON formatted log output for machine-readable logs
- Context injection (request_id, service, endpoint) via LoggerAdapter
- Standardized log fields across all components
- Integration with Python's standard logging module
"""

import logging
import json
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional, MutableMapping
from logging import LogRecord

# Context keys promoted to the top level of each JSON log line
PROMOTED_FIELDS = ("request_id", "service", "endpoint", "measurement", "bucket")

# Attributes every LogRecord carries; anything else came in through extra
_RESERVED_ATTRS = {
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
    - request_id, service, endpoint, measurement, bucket when present
    - context: Remaining extra fields
    - error: Error details (when exc_info is set)
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

        for key in PROMOTED_FIELDS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and key not in PROMOTED_FIELDS
        }
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


class ContextLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that injects context fields into all log records.

    A request handler gets one of these carrying its request_id so every
    line it writes can be correlated.
    """

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, extra or {})

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> tuple[str, MutableMapping[str, Any]]:
        """
        Process log message and inject context.

        Call-site extra wins over adapter context on key clashes.

        Args:
            msg: Log message
            kwargs: Log kwargs

        Returns:
            Tuple of (message, kwargs) with context injected
        """
        extra = dict(self.extra)
        extra.update(kwargs.get("extra") or {})
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
        new_extra = dict(self.extra)
        new_extra.update(context)
        return ContextLoggerAdapter(self.logger, new_extra)


def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structured logging for the application.

    Sets up:
    - JSON formatter for all handlers
    - Console handler with appropriate log level
    - Root logger configuration

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    log_level = log_level.upper()
    formatter = JSONFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("influxdb_client").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str, **context: Any) -> ContextLoggerAdapter:
    """
    Get a context-aware logger for a module.

    Args:
        name: Logger name (typically __name__)
        **context: Initial context fields (request_id, service, etc.)

    Returns:
        Context logger adapter

    Example:
        logger = get_logger(__name__, request_id="k3j9x0a1b2c4")
        logger.info("Attempting ingestion to DB")  # Will include request_id
    """
    base_logger = logging.getLogger(name)
    return ContextLoggerAdapter(base_logger, context)


def log_validation_failure(
    logger: logging.LoggerAdapter,
    reason: str,
    **context: Any
) -> None:
    """
    Log a rejected error report.

    Args:
        logger: Request-scoped logger
        reason: Human readable rejection reason
        **context: Additional context fields (content_type, missing_fields, ...)
    """
    logger.error(f"Rejected error report: {reason}", extra=context)


def log_store_call(
    logger: logging.LoggerAdapter,
    operation: str,
    bucket: str,
    duration_ms: Optional[float] = None,
    error: Optional[str] = None
) -> None:
    """
    Log a timeseries store call with timing and outcome.

    Args:
        logger: Logger to use
        operation: Store operation (e.g., 'write', 'find_organization')
        bucket: Target bucket
        duration_ms: Call duration in milliseconds (if available)
        error: Error message (if the call failed)
    """
    extra: Dict[str, Any] = {
        "operation": operation,
        "bucket": bucket,
    }

    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)
    if error is not None:
        extra["error"] = error

    if error:
        logger.error(f"Store call failed: {operation}", extra=extra)
    else:
        logger.info(f"Store call: {operation}", extra=extra)


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
