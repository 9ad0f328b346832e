"""Transcript-to-tracks pipeline: extract, score, dedup, resolve, report."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Final

from ...domain.matching.entities import (
    PipelineError,
    ProcessingReport,
    Resolved,
    TrackMatchResult,
    Unresolved,
)
from ...domain.matching.matcher import TrackMatcher
from ...domain.mentions.dedup import deduplicate
from ...domain.mentions.entities import MusicRecommendation
from ...domain.mentions.extractor import MentionExtractor, coerce_transcript
from ...domain.mentions.scoring import ConfidenceScorer
from ...domain.shared.enums import ErrorKind, UnresolvedReason
from ...domain.shared.exceptions import (
    CatalogError,
    DeadlineExceeded,
    RateLimitTimeout,
    SearchFailed,
    SystemicResolutionFailure,
)
from ...domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...domain.mentions.transcript import TranscriptText
    from ..interfaces.catalog_search import CatalogSearch

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY: Final[int] = 5
DEFAULT_SYSTEMIC_MIN_ITEMS: Final[int] = 2
SYSTEMIC_KINDS: Final[frozenset[ErrorKind]] = frozenset(
    {ErrorKind.SEARCH_FAILED, ErrorKind.RATE_LIMIT_TIMEOUT}
)

_Outcome = tuple[TrackMatchResult, PipelineError | None]


class TrackResolutionPipeline:
    """Runs the full pipeline over one transcript and returns a ProcessingReport.

    Extraction, scoring and dedup run synchronously. Resolution fans out over a
    fixed pool of workers sharing one iterator of recommendations, so at most
    ``concurrency`` searches are in flight. A failing item is recorded as
    ``Unresolved(SEARCH_FAILED)`` plus a ``PipelineError`` and the run goes on.
    """

    def __init__(
        self,
        *,
        catalog: CatalogSearch,
        matcher: TrackMatcher | None = None,
        extractor: MentionExtractor | None = None,
        scorer: ConfidenceScorer | None = None,
        concurrency: int | None = None,
        systemic_min_items: int = DEFAULT_SYSTEMIC_MIN_ITEMS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._catalog = catalog
        self._matcher = matcher or TrackMatcher()
        self._extractor = extractor or MentionExtractor()
        self._scorer = scorer or ConfidenceScorer()
        self._concurrency = max(
            1, concurrency or getattr(catalog, "max_concurrency", DEFAULT_CONCURRENCY)
        )
        self._systemic_min_items = systemic_min_items
        self._clock = clock

    @property
    def concurrency(self) -> int:
        return self._concurrency

    def recommend(self, transcript: TranscriptText | str) -> list[MusicRecommendation]:
        """Synchronous front half: extraction, scoring and dedup.

        Raises:
            ExtractionError: The transcript is not a non-empty string.
        """
        source = coerce_transcript(transcript)
        candidates = self._extractor.extract(source)
        scored = self._scorer.score(candidates, source)
        return deduplicate(scored)

    async def run(
        self,
        transcript: TranscriptText | str,
        *,
        deadline_seconds: float | None = None,
    ) -> ProcessingReport:
        """Process a transcript end to end.

        Args:
            transcript: Transcript text, optionally with segment timing.
            deadline_seconds: Wall-clock budget for resolution. Once spent, no
                new search starts; remaining items are reported as skipped.

        Raises:
            ExtractionError: The transcript is unusable.
            SystemicResolutionFailure: Every recommendation failed with the
                same root cause. The partial report travels with the error.
        """
        recommendations = self.recommend(transcript)
        if not recommendations:
            logger.info(LogTemplates.PIPELINE_COMPLETED, 0, 0, 0)
            return ProcessingReport()

        logger.info(LogTemplates.PIPELINE_STARTED, len(recommendations), self._concurrency)
        deadline_at = None if deadline_seconds is None else self._clock() + deadline_seconds
        outcomes: list[_Outcome | None] = [None] * len(recommendations)
        pending = iter(enumerate(recommendations))

        async def worker() -> None:
            for index, recommendation in pending:
                if deadline_at is not None and self._clock() >= deadline_at:
                    outcomes[index] = self._skipped(index, recommendation, deadline_seconds)
                    continue
                outcomes[index] = await self._resolve(index, recommendation)

        async with asyncio.TaskGroup() as tg:
            for _ in range(min(self._concurrency, len(recommendations))):
                tg.create_task(worker())

        report = self._build_report(recommendations, [o for o in outcomes if o is not None])
        self._check_systemic(report)
        logger.info(
            LogTemplates.PIPELINE_COMPLETED,
            len(report.resolved),
            len(report.unresolved),
            len(report.errors),
        )
        return report

    # ── Per-item resolution ─────────────────────────────────────────

    async def _resolve(self, index: int, recommendation: MusicRecommendation) -> _Outcome:
        artist, title = recommendation.artist, recommendation.title
        try:
            results = await self._catalog.search(artist, title)
        except SearchFailed as exc:
            error = PipelineError(
                kind=ErrorKind.SEARCH_FAILED,
                message=exc.message,
                index=index,
                artist=artist,
                title=title,
                cause=exc.cause_code,
                status_code=exc.status_code,
                attempts=exc.attempts,
            )
        except RateLimitTimeout as exc:
            error = PipelineError(
                kind=ErrorKind.RATE_LIMIT_TIMEOUT,
                message=exc.message,
                index=index,
                artist=artist,
                title=title,
                cause=exc.code,
            )
        except CatalogError as exc:
            error = PipelineError(
                kind=ErrorKind.SEARCH_FAILED,
                message=exc.message,
                index=index,
                artist=artist,
                title=title,
                cause=exc.code,
                status_code=exc.status_code,
                attempts=1,
            )
        except Exception as exc:
            logger.exception(LogTemplates.PIPELINE_ITEM_UNEXPECTED, artist, title)
            error = PipelineError(
                kind=ErrorKind.SEARCH_FAILED,
                message=str(exc) or type(exc).__name__,
                index=index,
                artist=artist,
                title=title,
                cause=type(exc).__name__,
            )
        else:
            return self._matcher.match(recommendation, results), None

        logger.warning(LogTemplates.PIPELINE_ITEM_FAILED, artist, title, error.message)
        unresolved = Unresolved(
            recommendation=recommendation,
            reason=UnresolvedReason.SEARCH_FAILED,
            cause=error.kind,
        )
        return unresolved, error

    def _skipped(
        self,
        index: int,
        recommendation: MusicRecommendation,
        deadline_seconds: float | None,
    ) -> _Outcome:
        logger.info(
            LogTemplates.PIPELINE_DEADLINE_SKIPPED, recommendation.artist, recommendation.title
        )
        exc = DeadlineExceeded(deadline_seconds or 0.0)
        error = PipelineError(
            kind=ErrorKind.DEADLINE_EXCEEDED,
            message=exc.message,
            index=index,
            artist=recommendation.artist,
            title=recommendation.title,
            cause=exc.code,
        )
        unresolved = Unresolved(
            recommendation=recommendation,
            reason=UnresolvedReason.SEARCH_FAILED,
            cause=ErrorKind.DEADLINE_EXCEEDED,
        )
        return unresolved, error

    # ── Reporting ───────────────────────────────────────────────────

    @staticmethod
    def _build_report(
        recommendations: list[MusicRecommendation],
        outcomes: list[_Outcome],
    ) -> ProcessingReport:
        resolved: list[Resolved] = []
        unresolved: list[Unresolved] = []
        errors: list[PipelineError] = []
        for result, error in outcomes:
            if isinstance(result, Resolved):
                resolved.append(result)
            else:
                unresolved.append(result)
            if error is not None:
                errors.append(error)
        return ProcessingReport(
            recommendations=recommendations,
            resolved=resolved,
            unresolved=unresolved,
            errors=errors,
        )

    def _check_systemic(self, report: ProcessingReport) -> None:
        """Raise when every attempted item failed with one and the same cause."""
        if report.resolved:
            return
        attempted = [e for e in report.errors if e.kind != ErrorKind.DEADLINE_EXCEEDED]
        no_match = len(report.unresolved) - len(report.errors)
        if no_match or len(attempted) < self._systemic_min_items:
            return
        if any(e.kind not in SYSTEMIC_KINDS for e in attempted):
            return
        keys = {e.cause_key for e in attempted}
        if len(keys) != 1:
            return

        kind, cause, status_code = keys.pop()
        description = f"{kind}: {cause}" + (f" (HTTP {status_code})" if status_code else "")
        logger.error(LogTemplates.PIPELINE_SYSTEMIC_FAILURE, len(attempted), description)
        systemic = PipelineError(
            kind=ErrorKind.SYSTEMIC_FAILURE,
            message=description,
            cause=cause,
            status_code=status_code,
        )
        partial = report.model_copy(update={"errors": [*report.errors, systemic]})
        raise SystemicResolutionFailure(description, partial)
