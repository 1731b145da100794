"""Unit tests for DocumentSubmitter and AsyncDocumentSubmitter."""

from __future__ import annotations

import json
from unittest.mock import Mock

import httpx
import pytest

from crpt_client.adapters.http.httpx_transport import (
    AsyncHttpxDocumentTransport,
    HttpxDocumentTransport,
)
from crpt_client.adapters.rate_limit.base import AbstractRateLimiter
from crpt_client.core.errors import (
    AcquireCancelledError,
    RejectedByServerAppError,
    TransportAppError,
    ValidationAppError,
)
from crpt_client.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from crpt_client.core.logging import (
    get_submission_id,
    reset_submission_id,
    set_submission_id,
)
from crpt_client.core.time_units import TimeUnit
from crpt_client.schemas.document import Description, Document
from crpt_client.services.submission_service import (
    AsyncDocumentSubmitter,
    DocumentSubmitter,
    build_headers,
)

API_URL = "https://crpt.test/api/v3/lk/documents/create"


class RecordingHandler:
    """httpx.MockTransport handler that records requests."""

    def __init__(
        self,
        status_code: int = 200,
        error_cls: type[httpx.RequestError] | None = None,
    ) -> None:
        self.status_code = status_code
        self.error_cls = error_cls
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error_cls is not None:
            raise self.error_cls("connection refused", request=request)
        return httpx.Response(self.status_code, text="{}")


def _transport(handler: RecordingHandler) -> HttpxDocumentTransport:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpxDocumentTransport(url=API_URL, client=client)


def _document() -> Document:
    return Document(
        description=Description(participant_inn="7700000000"),
        doc_id="doc-1",
        doc_type="LP_INTRODUCE_GOODS",
    )


def _limiter() -> Mock:
    return Mock(spec=AbstractRateLimiter)


def test_build_headers() -> None:
    assert build_headers("sig") == {
        "Content-Type": "application/json",
        "Signature": "sig",
    }


def test_submit_success_posts_json_with_signature() -> None:
    handler = RecordingHandler(status_code=200)
    limiter = _limiter()
    submitter = DocumentSubmitter(limiter, _transport(handler))

    result = submitter.submit(_document(), "base64-signature")

    assert result.ok is True
    assert result.status_code == 200
    assert result.error is None
    assert len(result.submission_id) == 32
    limiter.acquire.assert_called_once_with(None)

    request = handler.requests[0]
    assert request.method == "POST"
    assert str(request.url) == API_URL
    assert request.headers["Signature"] == "base64-signature"
    assert request.headers["Content-Type"] == "application/json"
    body = json.loads(request.content)
    assert body["doc_id"] == "doc-1"
    assert body["description"] == {"participant_inn": "7700000000"}


def test_acquire_happens_before_request() -> None:
    events: list[str] = []
    limiter = _limiter()
    limiter.acquire.side_effect = lambda cancel: events.append("acquire")

    def handler(request: httpx.Request) -> httpx.Response:
        events.append("post")
        return httpx.Response(201)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    submitter = DocumentSubmitter(limiter, HttpxDocumentTransport(API_URL, client=client))

    assert submitter.submit(_document(), "sig").ok is True
    assert events == ["acquire", "post"]


def test_non_success_status_is_reported_as_rejection() -> None:
    handler = RecordingHandler(status_code=400)
    submitter = DocumentSubmitter(_limiter(), _transport(handler))

    result = submitter.submit(_document(), "sig")

    assert result.ok is False
    assert result.status_code == 400
    assert isinstance(result.error, RejectedByServerAppError)
    assert result.error.status_code == 400
    with pytest.raises(RejectedByServerAppError):
        result.raise_for_error()


def test_transport_failure_is_reported_with_cause() -> None:
    handler = RecordingHandler(error_cls=httpx.ConnectError)
    submitter = DocumentSubmitter(_limiter(), _transport(handler))

    result = submitter.submit(_document(), "sig")

    assert result.ok is False
    assert result.status_code is None
    assert isinstance(result.error, TransportAppError)
    assert isinstance(result.error.__cause__, httpx.ConnectError)
    assert result.error.code == "transport_error"


@pytest.mark.parametrize("signature", ["", "   "])
def test_empty_signature_rejected_before_acquire(signature: str) -> None:
    handler = RecordingHandler()
    limiter = _limiter()
    submitter = DocumentSubmitter(limiter, _transport(handler))

    with pytest.raises(ValidationAppError) as exc:
        submitter.submit(_document(), signature)

    assert exc.value.code == "missing_signature"
    limiter.acquire.assert_not_called()
    assert handler.requests == []


def test_cancelled_acquire_sends_nothing() -> None:
    handler = RecordingHandler()
    limiter = _limiter()
    limiter.acquire.side_effect = AcquireCancelledError(
        code="acquire_cancelled", message="cancelled"
    )
    submitter = DocumentSubmitter(limiter, _transport(handler))
    cancel = Mock()

    with pytest.raises(AcquireCancelledError):
        submitter.submit(_document(), "sig", cancel=cancel)

    limiter.acquire.assert_called_once_with(cancel)
    assert handler.requests == []
    assert get_submission_id() is None


def test_submission_id_is_cleared_after_submit() -> None:
    submitter = DocumentSubmitter(_limiter(), _transport(RecordingHandler()))

    submitter.submit(_document(), "sig")

    assert get_submission_id() is None


def test_outer_submission_id_is_restored_after_submit() -> None:
    submitter = DocumentSubmitter(_limiter(), _transport(RecordingHandler()))
    token = set_submission_id("batch-7")
    try:
        result = submitter.submit(_document(), "sig")
        assert get_submission_id() == "batch-7"
    finally:
        reset_submission_id(token)

    assert result.submission_id != "batch-7"


@pytest.mark.parametrize("signature", ["Подпись", "sig\r\nX-Injected: 1", "sig\x00"])
def test_header_unsafe_signature_rejected_before_acquire(signature: str) -> None:
    handler = RecordingHandler()
    limiter = InMemoryFixedWindowRateLimiter(limit=1, time_unit=TimeUnit.MINUTES)
    submitter = DocumentSubmitter(limiter, _transport(handler))

    with pytest.raises(ValidationAppError) as exc:
        submitter.submit(Document(), signature)

    assert exc.value.code == "invalid_signature"
    assert limiter.state().admitted == 0
    assert handler.requests == []


class FakeAsyncLimiter:
    def __init__(self) -> None:
        self.calls = 0

    async def acquire(self) -> None:
        self.calls += 1


@pytest.mark.asyncio
async def test_async_submit_classifies_responses() -> None:
    statuses = iter([200, 503])

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Signature"] == "sig"
        return httpx.Response(next(statuses))

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    limiter = FakeAsyncLimiter()
    submitter = AsyncDocumentSubmitter(
        limiter, AsyncHttpxDocumentTransport(API_URL, client=client)
    )

    first = await submitter.submit(_document(), "sig")
    second = await submitter.submit(_document(), "sig")
    await client.aclose()

    assert first.ok is True
    assert second.ok is False
    assert second.status_code == 503
    assert isinstance(second.error, RejectedByServerAppError)
    assert limiter.calls == 2


@pytest.mark.asyncio
async def test_async_transport_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    submitter = AsyncDocumentSubmitter(
        FakeAsyncLimiter(), AsyncHttpxDocumentTransport(API_URL, client=client)
    )

    result = await submitter.submit(_document(), "sig")
    await client.aclose()

    assert result.ok is False
    assert result.status_code is None
    assert isinstance(result.error, TransportAppError)
