"""Rate limiter interfaces.

The submitters depend on these abstractions (not the concrete
implementation) so an alternative admission policy can be dropped in
without touching the HTTP layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class RateLimitState:
    """Point-in-time view of a limiter's current window.

    Attributes:
        limit: Max admissions per window.
        interval_seconds: Window length in seconds.
        window_start: Clock reading at which the current window began.
        admitted: Admissions granted since window_start.
        remaining: Admissions still available in the current window.
    """

    limit: int
    interval_seconds: float
    window_start: float
    admitted: int
    remaining: int


class CancelToken(Protocol):
    """Anything that can interrupt a blocked acquire (threading.Event fits)."""

    def is_set(self) -> bool: ...

    def wait(self, timeout: float | None = None) -> bool: ...


class AbstractRateLimiter(ABC):
    """Interface for blocking admission gates used from threads."""

    @abstractmethod
    def acquire(self, cancel: CancelToken | None = None) -> None:
        """Block until the caller may proceed, reserving one slot.

        Args:
            cancel: Optional token; setting it aborts a pending wait.

        Raises:
            AcquireCancelledError: If the wait was cancelled before admission.
        """
        raise NotImplementedError

    @abstractmethod
    def state(self) -> RateLimitState:
        """Return a consistent snapshot of the current window."""
        raise NotImplementedError


class AbstractAsyncRateLimiter(ABC):
    """Interface for admission gates used from asyncio tasks."""

    @abstractmethod
    async def acquire(self) -> None:
        """Wait until the task may proceed, reserving one slot.

        Raises:
            asyncio.CancelledError: If the task is cancelled while waiting.
        """
        raise NotImplementedError

    @abstractmethod
    def state(self) -> RateLimitState:
        raise NotImplementedError
