"""Rate-limited client for the CRPT document registration API."""

from crpt_client.client import AsyncRegistrationClient, RegistrationClient
from crpt_client.core.client_factory import create_async_client, create_client
from crpt_client.core.errors import (
    AcquireCancelledError,
    AppError,
    ConfigurationAppError,
    RejectedByServerAppError,
    TransportAppError,
    ValidationAppError,
)
from crpt_client.core.time_units import TimeUnit
from crpt_client.schemas.document import Description, Document, Product
from crpt_client.schemas.submission import SubmissionResult

__all__ = [
    "AcquireCancelledError",
    "AppError",
    "AsyncRegistrationClient",
    "ConfigurationAppError",
    "Description",
    "Document",
    "Product",
    "RegistrationClient",
    "RejectedByServerAppError",
    "SubmissionResult",
    "TimeUnit",
    "TransportAppError",
    "ValidationAppError",
    "create_async_client",
    "create_client",
]
