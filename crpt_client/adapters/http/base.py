"""Transport interfaces for posting documents to the registration API."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class TransportResponse:
    """Minimal view of an HTTP response.

    Attributes:
        status_code: HTTP status code.
        text: Response body decoded as text (may be empty).
    """

    status_code: int
    text: str = ""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class AbstractDocumentTransport(ABC):
    """Interface for blocking transports."""

    @abstractmethod
    def post(self, body: str, *, headers: dict[str, str]) -> TransportResponse:
        """POST a serialized JSON body to the registration endpoint.

        Args:
            body: JSON request body.
            headers: Extra request headers (content type, signature).

        Returns:
            TransportResponse for any status code.

        Raises:
            TransportAppError: If no response could be obtained.
        """
        ...

    def close(self) -> None:
        """Release connections held by the transport."""


class AbstractAsyncDocumentTransport(ABC):
    """Interface for asyncio transports."""

    @abstractmethod
    async def post(self, body: str, *, headers: dict[str, str]) -> TransportResponse:
        ...

    async def aclose(self) -> None:
        """Release connections held by the transport."""
