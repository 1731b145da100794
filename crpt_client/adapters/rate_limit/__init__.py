"""Rate limiting adapters.

This package keeps the admission policy behind a small abstraction so the
submitters never depend on a concrete limiter.
"""

from crpt_client.adapters.rate_limit.base import (
    AbstractAsyncRateLimiter,
    AbstractRateLimiter,
    RateLimitState,
)
from crpt_client.adapters.rate_limit.in_memory import (
    AsyncInMemoryFixedWindowRateLimiter,
    InMemoryFixedWindowRateLimiter,
)

__all__ = [
    "AbstractAsyncRateLimiter",
    "AbstractRateLimiter",
    "AsyncInMemoryFixedWindowRateLimiter",
    "InMemoryFixedWindowRateLimiter",
    "RateLimitState",
]
