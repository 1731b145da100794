"""Outcome of a single document submission."""

from __future__ import annotations

from dataclasses import dataclass

from crpt_client.core.errors import AppError


@dataclass(frozen=True)
class SubmissionResult:
    """Result of `DocumentSubmitter.submit`.

    Attributes:
        ok: True when the API answered with a 2xx status.
        status_code: HTTP status, or None if no response was received.
        submission_id: Correlation id used in logs for this submission.
        elapsed_seconds: Time spent in the HTTP call (excludes rate limit wait).
        error: TransportAppError or RejectedByServerAppError on failure.
    """

    ok: bool
    status_code: int | None
    submission_id: str
    elapsed_seconds: float = 0.0
    error: AppError | None = None

    def raise_for_error(self) -> None:
        """Raise the attached error, if any."""
        if self.error is not None:
            raise self.error
