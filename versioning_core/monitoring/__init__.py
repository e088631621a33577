"""
Logging support for the revision store.
"""

from versioning_core.monitoring.structured_logger import (
    JSONFormatter,
    LoggingContext,
    OperationLogger,
    StructuredLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "JSONFormatter",
    "LoggingContext",
    "OperationLogger",
    "StructuredLogger",
    "configure_logging",
    "get_logger",
]
