"""Client factory.

Centralizes client construction from settings so callers only decide
whether logging should be configured as well.
"""

from __future__ import annotations

from crpt_client.adapters.http.factory import create_async_transport, create_transport
from crpt_client.client import AsyncRegistrationClient, RegistrationClient
from crpt_client.core.config import Settings, settings
from crpt_client.core.logging import configure_logging


def create_client(
    app_settings: Settings | None = None,
    *,
    configure_logs: bool = False,
) -> RegistrationClient:
    """Create a RegistrationClient from settings.

    Args:
        app_settings: Settings to use; defaults to the global settings.
        configure_logs: Also configure root logging from `settings.log`.

    Returns:
        Client with limiter and httpx transport configured.
    """
    cfg = app_settings or settings
    if configure_logs:
        # Logging first so subsequent init logs are formatted as desired
        configure_logging(cfg.log)

    return RegistrationClient(
        cfg.api.time_unit,
        cfg.api.request_limit,
        transport=create_transport(cfg.api),
    )


def create_async_client(
    app_settings: Settings | None = None,
    *,
    configure_logs: bool = False,
) -> AsyncRegistrationClient:
    """Create an AsyncRegistrationClient from settings. See create_client()."""
    cfg = app_settings or settings
    if configure_logs:
        configure_logging(cfg.log)

    return AsyncRegistrationClient(
        cfg.api.time_unit,
        cfg.api.request_limit,
        transport=create_async_transport(cfg.api),
    )
