"""
Base class for on-demand AI operations (recommendations, message drafts).

Each operation extends this to get run IDs, timing, and a uniform result
envelope the API layer can turn into a response.
"""

from abc import ABC
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Generator, Optional
import logging
import time
import uuid

from src.common.llm_factory import (
    AIAuthenticationError,
    AIConfigurationError,
    AIRateLimitError,
    AIServiceError,
    classify_ai_error,
)

logger = logging.getLogger(__name__)

# User-facing texts for classified AI failures
AI_CONFIGURATION_MESSAGE = "AI service configuration error"
AI_RATE_LIMIT_MESSAGE = "AI service rate limit exceeded. Please try again later."
AI_AUTHENTICATION_MESSAGE = "AI service authentication failed"


def ai_error_message(error: AIServiceError, fallback: str) -> str:
    """User-facing text for a classified AI failure."""
    if isinstance(error, AIConfigurationError):
        return AI_CONFIGURATION_MESSAGE
    if isinstance(error, AIRateLimitError):
        return AI_RATE_LIMIT_MESSAGE
    if isinstance(error, AIAuthenticationError):
        return AI_AUTHENTICATION_MESSAGE
    return fallback


@dataclass
class OperationResult:
    """Result from an operation execution."""

    success: bool
    run_id: str
    operation: str
    data: Dict[str, Any]
    duration_ms: int
    error: Optional[str] = None
    status_code: int = 200
    model_used: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary for JSON serialization."""
        return {
            "success": self.success,
            "run_id": self.run_id,
            "operation": self.operation,
            "data": self.data,
            "duration_ms": self.duration_ms,
            "error": self.error,
            "model_used": self.model_used,
            "timestamp": self.timestamp.isoformat(),
        }


class OperationService(ABC):
    """Base class for AI operations."""

    operation_name: str  # Override in subclass
    fallback_error_message: str = "An unexpected error occurred"

    def create_run_id(self) -> str:
        """
        Generate unique run ID for tracking.

        Returns:
            Unique run ID string in format "op_{operation}_{random_hex}"
        """
        return f"op_{self.operation_name}_{uuid.uuid4().hex[:12]}"

    def create_success_result(
        self,
        run_id: str,
        data: Dict[str, Any],
        duration_ms: int,
        model_used: Optional[str] = None,
    ) -> OperationResult:
        return OperationResult(
            success=True,
            run_id=run_id,
            operation=self.operation_name,
            data=data,
            duration_ms=duration_ms,
            model_used=model_used,
        )

    def create_error_result(
        self,
        run_id: str,
        error: Exception,
        duration_ms: int,
    ) -> OperationResult:
        """
        Create a failed operation result from a provider or parsing error.

        The message is the user-facing text for the error class; the
        original exception is logged by the caller.
        """
        classified = classify_ai_error(error)
        return OperationResult(
            success=False,
            run_id=run_id,
            operation=self.operation_name,
            data={},
            duration_ms=duration_ms,
            error=self.user_message_for(classified),
            status_code=classified.status_code,
        )

    def user_message_for(self, error: AIServiceError) -> str:
        return ai_error_message(error, self.fallback_error_message)

    @contextmanager
    def timed_execution(self) -> Generator["OperationTimer", None, None]:
        """
        Context manager for timing operation execution.

        Usage:
            with self.timed_execution() as timer:
                # do work
                pass
            duration_ms = timer.duration_ms
        """
        timer = OperationTimer()
        try:
            yield timer
        finally:
            timer.stop()


@dataclass
class OperationTimer:
    """Timer utility for tracking operation duration."""

    start_time: float = field(default_factory=time.perf_counter)
    end_time: Optional[float] = None

    @property
    def duration_ms(self) -> int:
        if self.end_time is None:
            return int((time.perf_counter() - self.start_time) * 1000)
        return int((self.end_time - self.start_time) * 1000)

    def stop(self) -> int:
        self.end_time = time.perf_counter()
        return self.duration_ms
