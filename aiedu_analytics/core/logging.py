"""Structured logging configuration for the analytics engine.

Provides JSON-formatted logs with context tracking so that dashboard hosts can
ship engine logs to the same aggregation service as their own.
"""
import logging
import json
import sys
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import traceback


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging.

    Outputs logs in JSON format for easy parsing by log aggregation services.
    Includes timestamp, level, message, module, function, and custom fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON string.

        Args:
            record: LogRecord to format

        Returns:
            JSON string with log data
        """
        log_obj: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_obj["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info)
            }

        if hasattr(record, 'extra_fields'):
            log_obj.update(record.extra_fields)

        # Analytics context passed through `extra=`
        for attr in ['operation', 'duration_ms', 'record_count', 'filtered_count',
                     'rule', 'error_type']:
            if hasattr(record, attr):
                log_obj[attr] = getattr(record, attr)

        return json.dumps(log_obj, default=str)


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that includes context in all log messages.

    Example:
        >>> logger = ContextLogger(base_logger, {"operation": "build_dashboard"})
        >>> logger.info("Filtering records")
        # Output includes operation automatically
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        # The caller's extra dict is copied, never mutated
        kwargs["extra"] = {**(kwargs.get("extra") or {}), **self.extra}
        return msg, kwargs


def setup_logging(
    level: str = "INFO",
    json_format: bool = True,
) -> logging.Logger:
    """Configure application-wide logging.

    Library modules never call this; the hosting application does, usually
    with values from ``Settings``.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Whether to use JSON formatter (True for production)

    Returns:
        Configured root logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, level.upper()))

    if json_format:
        formatter = JSONFormatter()
    else:
        fmt = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        formatter = logging.Formatter(fmt)

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    return root_logger


def get_logger(name: str, context: Optional[Dict[str, Any]] = None) -> logging.Logger:
    """Get a logger with optional context.

    Args:
        name: Logger name (typically __name__ of module)
        context: Optional context dict to include in all logs

    Returns:
        Logger or ContextLogger if context provided
    """
    logger = logging.getLogger(name)

    if context:
        return ContextLogger(logger, context)

    return logger


class LogTimer:
    """Context manager for timing operations and logging duration.

    Example:
        >>> logger = get_logger(__name__)
        >>> with LogTimer(logger, "compute_metrics"):
        ...     bundle = compute_metrics(records)
        # Logs: "compute_metrics completed in 3.2ms"
    """

    def __init__(self, logger: logging.Logger, operation: str, level: int = logging.DEBUG):
        self.logger = logger
        self.operation = operation
        self.level = level
        self.start_time: Optional[float] = None
        self.duration_ms: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is None:
            return False
        self.duration_ms = (time.perf_counter() - self.start_time) * 1000

        if exc_type:
            self.logger.error(
                f"{self.operation} failed after {self.duration_ms:.1f}ms",
                extra={"operation": self.operation, "duration_ms": self.duration_ms,
                       "error_type": exc_type.__name__},
                exc_info=(exc_type, exc_val, exc_tb)
            )
        else:
            self.logger.log(
                self.level,
                f"{self.operation} completed in {self.duration_ms:.1f}ms",
                extra={"operation": self.operation, "duration_ms": self.duration_ms}
            )
        return False
