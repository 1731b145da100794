"""In-memory fixed-window rate limiters with blocking backpressure.

Notes:
- Per-process only: each client instance enforces its own limit.
- Callers over the limit wait for the window to end instead of failing.
- The whole check/sleep/reset/increment sequence runs under one lock, so
  bursts are serialized rather than released together at the boundary.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from dataclasses import dataclass
from typing import Awaitable, Callable

from crpt_client.adapters.rate_limit.base import (
    AbstractAsyncRateLimiter,
    AbstractRateLimiter,
    CancelToken,
    RateLimitState,
)
from crpt_client.core.errors import AcquireCancelledError, ConfigurationAppError
from crpt_client.core.time_units import TimeUnit

logger = logging.getLogger(__name__)

# How often a caller queued on the lock re-checks its cancel token.
_LOCK_POLL_SECONDS = 0.05


@dataclass
class _WindowState:
    window_start: float
    count: int

    def roll_over(self, now: float, interval: float) -> bool:
        """Start a fresh window if the current one has elapsed."""
        if now - self.window_start >= interval:
            self.restart(now)
            return True
        return False

    def restart(self, now: float) -> None:
        self.window_start = now
        self.count = 0

    def time_left(self, now: float, interval: float) -> float:
        return max(0.0, interval - (now - self.window_start))


def _validate_limit(limit: int) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ConfigurationAppError(
            code="invalid_request_limit",
            message="request limit must be a positive integer",
            details={"min_value": 1, "context": {"limit": repr(limit)}},
        )
    return limit


class _FixedWindowBase:
    """Window bookkeeping shared by the thread and asyncio limiters."""

    def __init__(
        self,
        *,
        limit: int,
        time_unit: TimeUnit | str,
        clock: Callable[[], float],
    ) -> None:
        self._limit = _validate_limit(limit)
        self._time_unit = TimeUnit.parse(time_unit)
        self._interval = self._time_unit.seconds
        self._clock = clock
        self._window = _WindowState(window_start=clock(), count=0)

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def time_unit(self) -> TimeUnit:
        return self._time_unit

    @property
    def interval_seconds(self) -> float:
        return self._interval

    def _snapshot(self) -> RateLimitState:
        return RateLimitState(
            limit=self._limit,
            interval_seconds=self._interval,
            window_start=self._window.window_start,
            admitted=self._window.count,
            remaining=max(0, self._limit - self._window.count),
        )

    def _roll_over_locked(self, now: float) -> None:
        previous = self._window.count
        if self._window.roll_over(now, self._interval):
            logger.debug(
                "rate_limit.window_reset",
                extra={"limit": self._limit, "previous_count": previous},
            )

    def _admit_locked(self) -> None:
        self._window.count += 1
        logger.debug(
            "rate_limit.acquired",
            extra={
                "limit": self._limit,
                "admitted": self._window.count,
                "remaining": self._limit - self._window.count,
            },
        )

    def _log_waiting(self, wait_s: float) -> None:
        logger.info(
            "rate_limit.waiting",
            extra={
                "limit": self._limit,
                "window_s": self._interval,
                "wait_s": round(wait_s, 6),
            },
        )


class InMemoryFixedWindowRateLimiter(_FixedWindowBase, AbstractRateLimiter):
    """Thread-safe fixed-window limiter: at most `limit` admissions per unit.

    The window length is exactly one `time_unit`. Windows roll over lazily
    on the next `acquire()`; there is no background timer.
    """

    def __init__(
        self,
        *,
        limit: int,
        time_unit: TimeUnit | str = TimeUnit.SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the limiter.

        Args:
            limit: Maximum admissions per window.
            time_unit: Window granularity (one unit per window).
            clock: Monotonic time source returning seconds.

        Raises:
            ConfigurationAppError: If limit or time_unit are invalid.
        """
        super().__init__(limit=limit, time_unit=time_unit, clock=clock)
        self._lock = threading.Lock()

    def acquire(self, cancel: CancelToken | None = None) -> None:
        """Block until the caller may proceed, reserving one slot.

        When the window is exhausted the caller sleeps for the rest of it
        while holding the lock; the next window then starts at the wake-up
        time and the caller takes its first slot.

        Args:
            cancel: Optional token (e.g. threading.Event). Setting it while
                the caller waits aborts the wait.

        Raises:
            AcquireCancelledError: If cancelled before admission. The window
                state is left as it was.
        """
        token: CancelToken = cancel if cancel is not None else threading.Event()

        self._lock_or_cancel(token)
        try:
            if token.is_set():
                self._cancelled("before_admission")

            now = self._clock()
            self._roll_over_locked(now)

            if self._window.count >= self._limit:
                wait_s = self._window.time_left(now, self._interval)
                self._log_waiting(wait_s)
                if token.wait(wait_s):
                    self._cancelled("while_waiting")
                self._window.restart(self._clock())

            self._admit_locked()
        finally:
            self._lock.release()

    def _lock_or_cancel(self, token: CancelToken) -> None:
        """Take the lock, giving up if the token is set while queued."""
        while not self._lock.acquire(timeout=_LOCK_POLL_SECONDS):
            if token.is_set():
                self._cancelled("queued")

    def state(self) -> RateLimitState:
        with self._lock:
            return self._snapshot()

    def _cancelled(self, stage: str) -> None:
        logger.warning(
            "rate_limit.cancelled",
            extra={"limit": self._limit, "stage": stage},
        )
        raise AcquireCancelledError(
            code="acquire_cancelled",
            message="Wait for a rate limit slot was cancelled",
            details={"context": {"stage": stage}},
        )


class AsyncInMemoryFixedWindowRateLimiter(_FixedWindowBase, AbstractAsyncRateLimiter):
    """asyncio flavour of the fixed-window limiter.

    Tasks over the limit sleep with `asyncio.sleep` while holding an
    `asyncio.Lock`. Cancelling a waiting task raises CancelledError and
    does not consume a slot.
    """

    def __init__(
        self,
        *,
        limit: int,
        time_unit: TimeUnit | str = TimeUnit.SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        super().__init__(limit=limit, time_unit=time_unit, clock=clock)
        self._sleep = sleep
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        async with self._lock:
            now = self._clock()
            self._roll_over_locked(now)

            if self._window.count >= self._limit:
                wait_s = self._window.time_left(now, self._interval)
                self._log_waiting(wait_s)
                try:
                    await self._sleep(wait_s)
                except asyncio.CancelledError:
                    logger.warning(
                        "rate_limit.cancelled",
                        extra={"limit": self._limit, "stage": "while_waiting"},
                    )
                    raise
                self._window.restart(self._clock())

            self._admit_locked()

    def state(self) -> RateLimitState:
        # Only mutated from the event loop thread.
        return self._snapshot()
