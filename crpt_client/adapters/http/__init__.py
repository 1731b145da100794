"""HTTP adapter layer - abstracts over the transport used to reach the API."""

from crpt_client.adapters.http.base import (
    AbstractAsyncDocumentTransport,
    AbstractDocumentTransport,
    TransportResponse,
)
from crpt_client.adapters.http.factory import create_async_transport, create_transport
from crpt_client.adapters.http.httpx_transport import (
    AsyncHttpxDocumentTransport,
    HttpxDocumentTransport,
)

__all__ = [
    "AbstractAsyncDocumentTransport",
    "AbstractDocumentTransport",
    "AsyncHttpxDocumentTransport",
    "HttpxDocumentTransport",
    "TransportResponse",
    "create_async_transport",
    "create_transport",
]
