"""Factory functions for creating transport instances from settings."""

from crpt_client.adapters.http.base import (
    AbstractAsyncDocumentTransport,
    AbstractDocumentTransport,
)
from crpt_client.adapters.http.httpx_transport import (
    AsyncHttpxDocumentTransport,
    HttpxDocumentTransport,
)
from crpt_client.core.config import ApiSettings, settings
from crpt_client.core.errors import ConfigurationAppError


def _resolve(api_settings: ApiSettings | None) -> ApiSettings:
    cfg = api_settings or settings.api
    if not cfg.api_url.startswith(("http://", "https://")):
        raise ConfigurationAppError(
            code="invalid_api_url",
            message=f"Registration API URL must be http(s): '{cfg.api_url}'",
        )
    return cfg


def create_transport(api_settings: ApiSettings | None = None) -> AbstractDocumentTransport:
    """Build the blocking transport.

    Reads `settings.api` unless explicit settings are passed.

    Raises:
        ConfigurationAppError: If the configured URL is not http(s).
    """
    cfg = _resolve(api_settings)
    return HttpxDocumentTransport(url=cfg.api_url, timeout_seconds=cfg.timeout_seconds)


def create_async_transport(
    api_settings: ApiSettings | None = None,
) -> AbstractAsyncDocumentTransport:
    """Build the asyncio transport. See create_transport()."""
    cfg = _resolve(api_settings)
    return AsyncHttpxDocumentTransport(url=cfg.api_url, timeout_seconds=cfg.timeout_seconds)
