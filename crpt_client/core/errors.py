"""Client-level exception types.

This module defines domain errors used across the limiter, transport and
submitter, enabling consistent error handling, logging and result reporting.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and callers.

    Fields are optional to keep the shape stable while letting each error
    carry only what is relevant.
    """

    code: str
    message: str
    hint: str
    min_value: int
    actual_value: int
    http_status: int
    url: str
    submission_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for client/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when caller input fails validation."""


class ConfigurationAppError(AppError):
    """Raised when a limiter or client is constructed with invalid settings."""


class AcquireCancelledError(AppError):
    """Raised when a caller's wait for a rate limit slot is cancelled.

    The slot is never counted as admitted when this is raised.
    """


class TransportAppError(AppError):
    """Raised when the HTTP call fails before a response is received."""


class RejectedByServerAppError(AppError):
    """Raised when the registration API answers with a non-2xx status."""

    @property
    def status_code(self) -> int | None:
        return (self.details or {}).get("http_status")
