"""
Logging support for the vector engine.
"""

from .structured_logger import (
    CorrelationIdManager,
    JSONFormatter,
    LoggingContext,
    OperationLogger,
    StructuredLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "CorrelationIdManager",
    "JSONFormatter",
    "LoggingContext",
    "OperationLogger",
    "StructuredLogger",
    "configure_logging",
    "get_logger",
]
