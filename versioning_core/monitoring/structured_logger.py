"""
Structured logging with correlation IDs for the revision store.

This module provides structured logging for tool calls and CLI commands, with
a correlation ID carried through each request so that every log line of one
create or list call can be tied together.
"""

import contextvars
import json
import logging
import logging.handlers
import threading
import time
import uuid
from enum import Enum
from typing import Optional

import structlog

from versioning_core.config.config_manager import LoggingConfig


# Context variable for correlation ID
correlation_id_context: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "correlation_id", default=None
)

_structlog_configured = False
_configure_lock = threading.Lock()


class LogLevel(Enum):
    """Log levels for structured logging."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class CorrelationIdProcessor:
    """Processor to add the correlation ID to log records."""

    def __call__(self, logger, method_name, event_dict):
        correlation_id = correlation_id_context.get()
        if correlation_id:
            event_dict["correlation_id"] = correlation_id
        return event_dict


class TimestampProcessor:
    """Processor to add consistent timestamps."""

    def __call__(self, logger, method_name, event_dict):
        event_dict["timestamp"] = time.time()
        event_dict["timestamp_iso"] = time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())
        return event_dict


def _configure_structlog():
    global _structlog_configured
    with _configure_lock:
        if _structlog_configured:
            return
        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                TimestampProcessor(),
                CorrelationIdProcessor(),
                structlog.dev.ConsoleRenderer(),
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _structlog_configured = True


class StructuredLogger:
    """
    Structured logger with correlation ID support.

    Wraps a structlog logger bound to a component name; keyword arguments
    passed to the log methods end up as structured fields.
    """

    def __init__(self, name: str, component: Optional[str] = None):
        """
        Initialize structured logger.

        Args:
            name: Logger name
            component: Component name for logging context
        """
        self.name = name
        self.component = component or name

        _configure_structlog()
        self.logger = structlog.get_logger(name).bind(component=self.component)

    def _log(self, level: LogLevel, message: str, **kwargs):
        getattr(self.logger, level.value)(message, **kwargs)

    def debug(self, message: str, **kwargs):
        self._log(LogLevel.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log(LogLevel.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log(LogLevel.WARNING, message, **kwargs)

    def error(self, message: str, error: Optional[Exception] = None, **kwargs):
        """Log error message with optional exception."""
        if error:
            kwargs.update(
                {
                    "error_type": type(error).__name__,
                    "error_message": str(error),
                }
            )
        self._log(LogLevel.ERROR, message, **kwargs)

    def with_context(self, **context) -> "StructuredLogger":
        """Create a new logger with additional context."""
        new_logger = StructuredLogger(self.name, self.component)
        new_logger.logger = self.logger.bind(**context)
        return new_logger


class LoggingContext:
    """Context manager that sets a correlation ID for the enclosed calls."""

    def __init__(self, correlation_id: Optional[str] = None):
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self._token = None

    def __enter__(self):
        self._token = correlation_id_context.set(self.correlation_id)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        correlation_id_context.reset(self._token)


class OperationLogger:
    """Logger for tracking operations with timing."""

    def __init__(self, logger: StructuredLogger, operation: str):
        """
        Initialize operation logger.

        Args:
            logger: Structured logger instance
            operation: Operation name
        """
        self.logger = logger
        self.operation = operation
        self.start_time = None
        self.context = {}

    def start(self, **context):
        self.start_time = time.time()
        self.context = context
        self.logger.debug(
            f"Starting operation: {self.operation}",
            operation=self.operation,
            operation_status="started",
            **context,
        )

    def success(self, **additional_context):
        duration_ms = (time.time() - self.start_time) * 1000 if self.start_time else 0.0
        self.logger.info(
            f"Operation completed successfully: {self.operation}",
            operation=self.operation,
            operation_status="success",
            duration_ms=duration_ms,
            **self.context,
            **additional_context,
        )

    def failure(self, error: Exception, **additional_context):
        duration_ms = (time.time() - self.start_time) * 1000 if self.start_time else 0.0
        self.logger.error(
            f"Operation failed: {self.operation}",
            error=error,
            operation=self.operation,
            operation_status="error",
            duration_ms=duration_ms,
            **self.context,
            **additional_context,
        )

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.failure(exc_val)


class JSONFormatter(logging.Formatter):
    """JSON formatter for standard library logging integration."""

    def format(self, record):
        log_entry = {
            "timestamp": record.created,
            "timestamp_iso": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(record.created)),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "thread_name": record.threadName,
        }

        correlation_id = correlation_id_context.get()
        if correlation_id:
            log_entry["correlation_id"] = correlation_id

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


def get_logger(name: str, component: Optional[str] = None) -> StructuredLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name
        component: Component name for context

    Returns:
        Configured structured logger
    """
    return StructuredLogger(name, component)


def configure_logging(
    logging_config: Optional[LoggingConfig] = None, logger_name: Optional[str] = None
):
    """
    Configure a logger (the root logger by default) from a LoggingConfig.

    Installs a console handler and, when a file path is configured, a
    size-rotated file handler. Existing handlers on the logger are replaced.

    Args:
        logging_config: LoggingConfig instance; defaults are used when None
        logger_name: Logger to configure; None for the root logger
    """
    if logging_config is None:
        logging_config = LoggingConfig()

    level = getattr(logging, logging_config.level.value)

    target_logger = logging.getLogger(logger_name)
    target_logger.setLevel(level)

    for handler in target_logger.handlers[:]:
        target_logger.removeHandler(handler)

    if logging_config.json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(logging_config.format)

    handlers = []
    if logging_config.enable_console:
        handlers.append(logging.StreamHandler())
    if logging_config.file_path:
        handlers.append(
            logging.handlers.RotatingFileHandler(
                logging_config.file_path,
                maxBytes=logging_config.max_file_size,
                backupCount=logging_config.backup_count,
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        target_logger.addHandler(handler)
