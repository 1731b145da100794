"""httpx-backed transports for the registration API."""

from __future__ import annotations

import httpx

from crpt_client.adapters.http.base import (
    AbstractAsyncDocumentTransport,
    AbstractDocumentTransport,
    TransportResponse,
)
from crpt_client.core.errors import TransportAppError


def _transport_error(url: str, exc: httpx.HTTPError) -> TransportAppError:
    return TransportAppError(
        code="transport_error",
        message=f"Request to registration API failed: {exc.__class__.__name__}: {exc}",
        details={"url": url},
    )


class HttpxDocumentTransport(AbstractDocumentTransport):
    """Blocking transport built on `httpx.Client`.

    The underlying client keeps a connection pool and is safe to share
    between threads.
    """

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            url: Registration endpoint receiving the POST.
            timeout_seconds: Timeout applied to each request.
            client: Optional preconfigured client (e.g. with a mock transport).
        """
        self.url = url
        self.client = client or httpx.Client(timeout=timeout_seconds)

    def post(self, body: str, *, headers: dict[str, str]) -> TransportResponse:
        try:
            response = self.client.post(self.url, content=body.encode("utf-8"), headers=headers)
        except httpx.HTTPError as exc:
            raise _transport_error(self.url, exc) from exc
        return TransportResponse(status_code=response.status_code, text=response.text)

    def close(self) -> None:
        self.client.close()


class AsyncHttpxDocumentTransport(AbstractAsyncDocumentTransport):
    """asyncio transport built on `httpx.AsyncClient`."""

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = url
        self.client = client or httpx.AsyncClient(timeout=timeout_seconds)

    async def post(self, body: str, *, headers: dict[str, str]) -> TransportResponse:
        try:
            response = await self.client.post(
                self.url, content=body.encode("utf-8"), headers=headers
            )
        except httpx.HTTPError as exc:
            raise _transport_error(self.url, exc) from exc
        return TransportResponse(status_code=response.status_code, text=response.text)

    async def aclose(self) -> None:
        await self.client.aclose()
