"""
Structured logging with correlation IDs for the vector engine.

This module provides structured logging built on structlog, correlation ID
tracking through context variables, timed operation records, and the
process-wide handler setup driven by LoggingConfig.
"""

import json
import logging
import logging.handlers
import threading
import time
import uuid
import contextvars
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

import structlog

from vector_core.config.config_manager import LoggingConfig


# Context variable for correlation ID
correlation_id_context: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "correlation_id", default=None
)

_structlog_lock = threading.Lock()
_structlog_configured = False


class LogLevel(Enum):
    """Log levels for structured logging."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def _iso_timestamp(epoch: float) -> str:
    return datetime.fromtimestamp(epoch, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class CorrelationIdProcessor:
    """Processor to add correlation ID to log records."""

    def __call__(self, logger, method_name, event_dict):
        """Add the correlation ID to log event."""
        correlation_id = correlation_id_context.get()
        if correlation_id:
            event_dict["correlation_id"] = correlation_id

        return event_dict


class TimestampProcessor:
    """Processor to add consistent timestamps."""

    def __call__(self, logger, method_name, event_dict):
        now = time.time()
        event_dict["timestamp"] = now
        event_dict["timestamp_iso"] = _iso_timestamp(now)
        return event_dict


class VectorEngineFormatter:
    """Adds level and thread information to every event."""

    def __call__(self, logger, method_name, event_dict):
        event_dict.setdefault("level", method_name)
        event_dict["thread_name"] = threading.current_thread().name
        return event_dict


def _configure_structlog():
    """Configure structlog processors once per process."""
    global _structlog_configured
    with _structlog_lock:
        if _structlog_configured:
            return

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                TimestampProcessor(),
                CorrelationIdProcessor(),
                structlog.contextvars.merge_contextvars,
                VectorEngineFormatter(),
                structlog.dev.ConsoleRenderer(colors=False),
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _structlog_configured = True


class StructuredLogger:
    """
    Structured logger with correlation ID support.

    Every record carries the component name, so batch writes and database
    opens can be followed across collections.
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


class CorrelationIdManager:
    """Manager for correlation ID lifecycle."""

    @staticmethod
    def generate_correlation_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def set_correlation_id(correlation_id: Optional[str]):
        correlation_id_context.set(correlation_id)

    @staticmethod
    def get_correlation_id() -> Optional[str]:
        return correlation_id_context.get()

    @staticmethod
    def clear_context():
        correlation_id_context.set(None)


class LoggingContext:
    """Context manager binding a correlation ID for the enclosed block."""

    def __init__(self, correlation_id: Optional[str] = None):
        self.correlation_id = correlation_id or CorrelationIdManager.generate_correlation_id()
        self._token = None

    def __enter__(self):
        self._token = correlation_id_context.set(self.correlation_id)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        correlation_id_context.reset(self._token)


class OperationLogger:
    """
    Logger for tracking operations with timing.

    Starting an operation outside any correlation scope opens one, so every
    record written while the operation runs (including by tasks it spawns)
    carries the same correlation ID. The scope closes when the operation ends.
    """

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
        self.correlation_id = None
        self._token = None

    def start(self, **context):
        """Start operation logging."""
        self.start_time = time.time()
        self.context = context

        self.correlation_id = correlation_id_context.get()
        if self.correlation_id is None:
            self.correlation_id = CorrelationIdManager.generate_correlation_id()
            self._token = correlation_id_context.set(self.correlation_id)

        self.logger.debug(
            f"Starting operation: {self.operation}",
            operation=self.operation,
            operation_status="started",
            **context,
        )

    def success(self, **additional_context):
        """Log successful operation completion."""
        if self.start_time:
            duration_ms = (time.time() - self.start_time) * 1000
            self.logger.info(
                f"Operation completed successfully: {self.operation}",
                operation=self.operation,
                operation_status="success",
                duration_ms=duration_ms,
                **{**self.context, **additional_context},
            )

    def error(self, error: Exception, **additional_context):
        """Log operation error."""
        if self.start_time:
            duration_ms = (time.time() - self.start_time) * 1000
            self.logger.error(
                f"Operation failed: {self.operation}",
                error=error,
                operation=self.operation,
                operation_status="error",
                duration_ms=duration_ms,
                **{**self.context, **additional_context},
            )

    def __enter__(self):
        if self.start_time is None:
            self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type:
                self.error(exc_val)
            else:
                self.success()
        finally:
            if self._token is not None:
                correlation_id_context.reset(self._token)
                self._token = None


class JSONFormatter(logging.Formatter):
    """JSON formatter for standard library logging integration."""

    def format(self, record):
        """Format log record as JSON."""
        log_entry = {
            "timestamp": record.created,
            "timestamp_iso": _iso_timestamp(record.created),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "thread_name": record.threadName,
        }

        correlation_id = CorrelationIdManager.get_correlation_id()
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


def configure_logging(config: Optional[LoggingConfig] = None) -> logging.Logger:
    """
    Configure the root logger from a LoggingConfig.

    Installs a console handler (when enabled) and a rotating file handler
    (when a file path is set), replacing any handlers already present.

    Returns:
        The configured root logger
    """
    config = config or LoggingConfig()
    level = getattr(logging, config.level.value)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    if config.json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(config.format)

    if config.enable_console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if config.file_path:
        file_handler = logging.handlers.RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    return root_logger
