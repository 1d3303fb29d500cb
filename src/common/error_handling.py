"""
Error-logging helpers shared by the profile, CSV and AI services.

Exceptions are logged with consistent context and then propagated;
nothing here swallows an error.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional


@dataclass
class ServiceError:
    """
    Structured record of a failure inside one request.

    Used for diagnostics attached to responses, never raised.
    """

    component: str  # e.g., "csv", "profile", "ai"
    operation: str  # e.g., "parse_rows", "fetch_profile"
    message: str
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    exception_type: Optional[str] = None


class ErrorCollector:
    """Collects non-fatal errors during a single pipeline run."""

    def __init__(self):
        self.errors: List[ServiceError] = []

    def add_error(
        self,
        component: str,
        operation: str,
        message: str,
        exception: Optional[Exception] = None,
    ) -> None:
        self.errors.append(
            ServiceError(
                component=component,
                operation=operation,
                message=message,
                exception_type=type(exception).__name__ if exception else None,
            )
        )

    def get_error_messages(self) -> List[str]:
        return [e.message for e in self.errors]


def log_on_exception(
    logger: logging.Logger,
    operation: str,
    level: int = logging.WARNING,
    include_traceback: bool = False,
):
    """
    Context manager for logging exceptions without swallowing them.

    Usage:
        with log_on_exception(logger, "RapidAPI profile fetch", level=logging.ERROR):
            response = requests.get(...)

    Args:
        logger: Logger instance to use
        operation: Operation description for the log message
        level: Log level (default: WARNING)
        include_traceback: Whether to include stack trace in log
    """

    class ExceptionLogger:
        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_val is not None:
                logger.log(level, f"[{operation}] Failed: {exc_val}", exc_info=include_traceback)
            # Never suppress the exception
            return False

    return ExceptionLogger()
