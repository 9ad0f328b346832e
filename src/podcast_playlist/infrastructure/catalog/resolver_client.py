"""Catalog search wrapper adding a shared request quota, bounded fan-out and retries."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Final

from podcast_playlist.application.interfaces.catalog_search import CatalogSearch
from podcast_playlist.domain.shared.exceptions import CatalogError, SearchFailed
from podcast_playlist.domain.shared.messages import ErrorMessages, LogTemplates

from .rate_limiter import Clock, RollingWindowLimiter, Sleep

if TYPE_CHECKING:
    from podcast_playlist.config.settings import ResolverSettings
    from podcast_playlist.domain.matching.entities import CatalogSearchResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES: Final[int] = 3
DEFAULT_BASE_DELAY: Final[float] = 0.25
DEFAULT_MAX_DELAY: Final[float] = 8.0
DEFAULT_MAX_CONCURRENCY: Final[int] = 5


def backoff_delay(
    attempt: int,
    *,
    base_delay: float = DEFAULT_BASE_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
    retry_after: float | None = None,
    previous: float = 0.0,
) -> float:
    """Delay before retry number *attempt* (1-based).

    ``base_delay * 2**(attempt-1)`` capped at ``max_delay``, unless the service
    sent a ``retry_after`` hint, which is used as-is. The result is never
    smaller than *previous*.
    """
    if retry_after is not None and retry_after >= 0:
        delay = retry_after
    else:
        delay = min(max_delay, base_delay * 2 ** (attempt - 1))
    return max(delay, previous)


class RateLimitedResolverClient(CatalogSearch):
    """Wraps a raw catalog backend with quota, concurrency and retry policy.

    Every attempt, retries included, takes a slot from the rolling quota.
    Transient failures (429, 5xx, transport errors) are retried with
    exponential backoff; anything else fails the search at once.
    """

    def __init__(
        self,
        backend: CatalogSearch,
        *,
        limiter: RollingWindowLimiter | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_delay: float = DEFAULT_BASE_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self._backend = backend
        self._limiter = limiter or RollingWindowLimiter(sleep=sleep)
        self._max_retries = max_retries
        self._base_delay = base_delay
        self._max_delay = max_delay
        self._max_concurrency = max_concurrency
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls,
        backend: CatalogSearch,
        settings: ResolverSettings,
        *,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> RateLimitedResolverClient:
        limiter = RollingWindowLimiter(
            settings.requests_per_window,
            settings.window_seconds,
            max_wait=settings.max_wait_seconds,
            clock=clock,
            sleep=sleep,
        )
        return cls(
            backend,
            limiter=limiter,
            max_retries=settings.max_retries,
            base_delay=settings.base_delay_seconds,
            max_delay=settings.max_delay_seconds,
            max_concurrency=settings.max_concurrency,
            sleep=sleep,
        )

    @property
    def max_concurrency(self) -> int:
        return self._max_concurrency

    @property
    def limiter(self) -> RollingWindowLimiter:
        return self._limiter

    async def search(self, artist: str, title: str) -> list[CatalogSearchResult]:
        """Search with quota, retries and fan-out applied.

        Raises:
            RateLimitTimeout: No quota slot within the configured max wait.
            SearchFailed: Non-retriable error, or retries exhausted.
        """
        async with self._semaphore:
            return await self._search_with_retry(artist, title)

    async def _search_with_retry(self, artist: str, title: str) -> list[CatalogSearchResult]:
        attempt = 0
        delay = 0.0
        while True:
            attempt += 1
            await self._limiter.acquire()
            try:
                return await self._backend.search(artist, title)
            except CatalogError as exc:
                if not exc.transient:
                    logger.warning(LogTemplates.SEARCH_NOT_RETRIABLE, artist, title, exc.message)
                    raise SearchFailed(
                        ErrorMessages.SEARCH_NOT_RETRIABLE.format(
                            artist=artist, title=title, error=exc.message
                        ),
                        cause=exc,
                        attempts=attempt,
                        transient=False,
                    ) from exc

                if attempt > self._max_retries:
                    logger.warning(LogTemplates.SEARCH_GAVE_UP, artist, title, attempt, exc.code)
                    raise SearchFailed(
                        ErrorMessages.SEARCH_RETRIES_EXHAUSTED.format(
                            artist=artist, title=title, attempts=attempt
                        ),
                        cause=exc,
                        attempts=attempt,
                        transient=True,
                    ) from exc

                delay = backoff_delay(
                    attempt,
                    base_delay=self._base_delay,
                    max_delay=self._max_delay,
                    retry_after=getattr(exc, "retry_after", None),
                    previous=delay,
                )
                logger.info(
                    LogTemplates.SEARCH_RETRYING,
                    artist,
                    title,
                    exc.code,
                    attempt,
                    self._max_retries,
                    delay,
                )
                await self._sleep(delay)

    async def close(self) -> None:
        await self._backend.close()
