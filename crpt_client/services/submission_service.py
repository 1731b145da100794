"""Document submission service.

Orchestrates one submission under rate limit admission control:
- Signature validation
- Blocking admission through the rate limiter
- JSON serialization of the document
- HTTP POST through the transport adapter
- Classification of the outcome into a SubmissionResult

Failures after admission are reported on the result; the limiter slot
stays consumed and no retry is attempted.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import Callable

from crpt_client.adapters.http.base import (
    AbstractAsyncDocumentTransport,
    AbstractDocumentTransport,
    TransportResponse,
)
from crpt_client.adapters.rate_limit.base import (
    AbstractAsyncRateLimiter,
    AbstractRateLimiter,
    CancelToken,
)
from crpt_client.core.errors import (
    RejectedByServerAppError,
    TransportAppError,
    ValidationAppError,
)
from crpt_client.core.logging import reset_submission_id, set_submission_id
from crpt_client.schemas.document import Document
from crpt_client.schemas.submission import SubmissionResult

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "Signature"
CONTENT_TYPE_JSON = "application/json"


def build_headers(signature: str) -> dict[str, str]:
    """Build request headers carrying the document signature."""
    return {
        "Content-Type": CONTENT_TYPE_JSON,
        SIGNATURE_HEADER: signature,
    }


def _validate_signature(signature: str) -> None:
    if not isinstance(signature, str) or not signature.strip():
        raise ValidationAppError(
            code="missing_signature",
            message="Document signature must be a non-empty string",
        )
    # HTTP header values are sent as ASCII and may not contain line breaks.
    if not all(c == "\t" or " " <= c <= "~" for c in signature):
        raise ValidationAppError(
            code="invalid_signature",
            message="Document signature must contain printable ASCII characters only",
            details={"hint": "base64-encode binary or non-ASCII signatures"},
        )


def _new_submission_id() -> str:
    return uuid.uuid4().hex


def _classify(
    response: TransportResponse,
    *,
    submission_id: str,
    elapsed: float,
) -> SubmissionResult:
    """Turn an HTTP response into a SubmissionResult (2xx = success)."""
    if response.is_success:
        logger.info(
            "document.submitted",
            extra={"status": response.status_code, "duration_ms": round(elapsed * 1000, 2)},
        )
        return SubmissionResult(
            ok=True,
            status_code=response.status_code,
            submission_id=submission_id,
            elapsed_seconds=elapsed,
        )

    logger.warning(
        "document.rejected",
        extra={"status": response.status_code, "duration_ms": round(elapsed * 1000, 2)},
    )
    error = RejectedByServerAppError(
        code="rejected_by_server",
        message=f"Registration API rejected the document with status {response.status_code}",
        details={"http_status": response.status_code, "submission_id": submission_id},
    )
    return SubmissionResult(
        ok=False,
        status_code=response.status_code,
        submission_id=submission_id,
        elapsed_seconds=elapsed,
        error=error,
    )


def _transport_failure(
    exc: TransportAppError,
    *,
    submission_id: str,
    elapsed: float,
) -> SubmissionResult:
    logger.warning(
        "document.transport_error",
        extra={"error_code": exc.code, "error": exc.message},
    )
    return SubmissionResult(
        ok=False,
        status_code=None,
        submission_id=submission_id,
        elapsed_seconds=elapsed,
        error=exc,
    )


class DocumentSubmitter:
    """Submit documents from any number of threads under a shared limiter.

    Attributes:
        limiter: Admission gate consulted before every request.
        transport: Adapter performing the HTTP POST.
    """

    def __init__(
        self,
        limiter: AbstractRateLimiter,
        transport: AbstractDocumentTransport,
        *,
        timer: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.limiter = limiter
        self.transport = transport
        self._timer = timer

    def submit(
        self,
        document: Document,
        signature: str,
        *,
        cancel: CancelToken | None = None,
    ) -> SubmissionResult:
        """Register one document with the API.

        Blocks in the rate limiter until a slot is available. The network
        call itself happens outside the limiter lock.

        Args:
            document: Document to register.
            signature: Opaque signature sent in the `Signature` header.
            cancel: Optional token that aborts the rate limit wait.

        Returns:
            SubmissionResult describing success or the failure cause.

        Raises:
            ValidationAppError: If the signature is empty or not header-safe.
            AcquireCancelledError: If the wait for a slot was cancelled;
                nothing is sent in that case.
        """
        _validate_signature(signature)

        submission_id = _new_submission_id()
        context_token = set_submission_id(submission_id)
        try:
            self.limiter.acquire(cancel)

            body = document.model_dump_json()
            started = self._timer()
            try:
                response = self.transport.post(body, headers=build_headers(signature))
            except TransportAppError as exc:
                return _transport_failure(
                    exc, submission_id=submission_id, elapsed=self._timer() - started
                )
            return _classify(
                response, submission_id=submission_id, elapsed=self._timer() - started
            )
        finally:
            reset_submission_id(context_token)


class AsyncDocumentSubmitter:
    """asyncio counterpart of DocumentSubmitter.

    Cancelling the calling task while it waits for a slot propagates
    asyncio.CancelledError and nothing is sent.
    """

    def __init__(
        self,
        limiter: AbstractAsyncRateLimiter,
        transport: AbstractAsyncDocumentTransport,
        *,
        timer: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.limiter = limiter
        self.transport = transport
        self._timer = timer

    async def submit(self, document: Document, signature: str) -> SubmissionResult:
        _validate_signature(signature)

        submission_id = _new_submission_id()
        context_token = set_submission_id(submission_id)
        try:
            await self.limiter.acquire()

            body = document.model_dump_json()
            started = self._timer()
            try:
                response = await self.transport.post(body, headers=build_headers(signature))
            except TransportAppError as exc:
                return _transport_failure(
                    exc, submission_id=submission_id, elapsed=self._timer() - started
                )
            return _classify(
                response, submission_id=submission_id, elapsed=self._timer() - started
            )
        finally:
            reset_submission_id(context_token)
