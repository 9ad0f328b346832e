"""Rolling-window request quota shared by every catalog search of a client."""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from collections.abc import Awaitable, Callable
from typing import Final

from podcast_playlist.domain.shared.exceptions import RateLimitTimeout
from podcast_playlist.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

DEFAULT_REQUESTS_PER_WINDOW: Final[int] = 100
DEFAULT_WINDOW_SECONDS: Final[float] = 60.0
DEFAULT_MAX_WAIT_SECONDS: Final[float] = 30.0

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


class RollingWindowLimiter:
    """Admits at most ``capacity`` dispatches in any ``window_seconds`` interval.

    Dispatch times are kept in a deque; a slot frees exactly ``window_seconds``
    after the oldest dispatch still in the window. Acquisition is serialized by
    an ``asyncio.Lock`` so waiters are admitted in arrival order, and each
    waiter's ``max_wait`` budget runs from the moment it called ``acquire``.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_REQUESTS_PER_WINDOW,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        *,
        max_wait: float = DEFAULT_MAX_WAIT_SECONDS,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")
        self._capacity = capacity
        self._window = window_seconds
        self._max_wait = max_wait
        self._clock = clock
        self._sleep = sleep
        self._dispatched: deque[float] = deque()
        self._lock = asyncio.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def window_seconds(self) -> float:
        return self._window

    def in_window(self) -> int:
        """Number of dispatches still counted against the current window."""
        self._evict(self._clock())
        return len(self._dispatched)

    def _evict(self, now: float) -> None:
        while self._dispatched and self._dispatched[0] + self._window <= now:
            self._dispatched.popleft()

    async def acquire(self) -> float:
        """Take one quota slot, suspending while the window is full.

        Time queued behind other waiters counts toward ``max_wait``.

        Returns:
            Seconds between the call and the granted slot.

        Raises:
            RateLimitTimeout: The slot would only free after ``max_wait``.
        """
        started = self._clock()
        async with self._lock:
            while True:
                now = self._clock()
                self._evict(now)
                if len(self._dispatched) < self._capacity:
                    self._dispatched.append(now)
                    return now - started

                needed = self._dispatched[0] + self._window - now
                total = (now - started) + needed
                if total > self._max_wait:
                    logger.warning(LogTemplates.RATE_LIMIT_TIMEOUT, total, self._max_wait)
                    raise RateLimitTimeout(total, self._max_wait)

                logger.debug(LogTemplates.RATE_LIMIT_WAITING, needed)
                await self._sleep(needed)
