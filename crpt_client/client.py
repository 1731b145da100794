"""Rate-limited clients for the CRPT document registration API."""

from __future__ import annotations

from types import TracebackType

from crpt_client.adapters.http.base import (
    AbstractAsyncDocumentTransport,
    AbstractDocumentTransport,
)
from crpt_client.adapters.http.factory import create_async_transport, create_transport
from crpt_client.adapters.rate_limit.base import CancelToken
from crpt_client.adapters.rate_limit.in_memory import (
    AsyncInMemoryFixedWindowRateLimiter,
    InMemoryFixedWindowRateLimiter,
)
from crpt_client.core.time_units import TimeUnit
from crpt_client.schemas.document import Document
from crpt_client.schemas.submission import SubmissionResult
from crpt_client.services.submission_service import (
    AsyncDocumentSubmitter,
    DocumentSubmitter,
)


class RegistrationClient:
    """Thread-safe client sending at most `request_limit` requests per `time_unit`.

    One instance owns one limiter; share the instance between threads to
    share the limit. Callers over the limit block until the window ends.

    Example:
        >>> with RegistrationClient(TimeUnit.SECONDS, 5) as api:
        ...     result = api.create_document(Document(doc_type="LP_INTRODUCE_GOODS"), "sig")
    """

    def __init__(
        self,
        time_unit: TimeUnit | str,
        request_limit: int,
        *,
        transport: AbstractDocumentTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            time_unit: Window granularity; the window is one unit long.
            request_limit: Maximum requests per window (must be positive).
            transport: Optional transport; defaults to the httpx transport
                built from settings.

        Raises:
            ConfigurationAppError: If time_unit or request_limit are invalid.
        """
        self.limiter = InMemoryFixedWindowRateLimiter(limit=request_limit, time_unit=time_unit)
        self.transport = transport or create_transport()
        self.submitter = DocumentSubmitter(self.limiter, self.transport)

    def create_document(
        self,
        document: Document,
        signature: str,
        *,
        cancel: CancelToken | None = None,
    ) -> SubmissionResult:
        """Submit a document introducing goods into circulation.

        See DocumentSubmitter.submit for blocking and error semantics.
        """
        return self.submitter.submit(document, signature, cancel=cancel)

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "RegistrationClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class AsyncRegistrationClient:
    """asyncio flavour of RegistrationClient, shared between tasks of one loop."""

    def __init__(
        self,
        time_unit: TimeUnit | str,
        request_limit: int,
        *,
        transport: AbstractAsyncDocumentTransport | None = None,
    ) -> None:
        self.limiter = AsyncInMemoryFixedWindowRateLimiter(
            limit=request_limit, time_unit=time_unit
        )
        self.transport = transport or create_async_transport()
        self.submitter = AsyncDocumentSubmitter(self.limiter, self.transport)

    async def create_document(self, document: Document, signature: str) -> SubmissionResult:
        return await self.submitter.submit(document, signature)

    async def aclose(self) -> None:
        await self.transport.aclose()

    async def __aenter__(self) -> "AsyncRegistrationClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
