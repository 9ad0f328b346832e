"""
Tests for the Track Resolution Pipeline

Tests for:
- End-to-end extraction, dedup and resolution examples
- Per-item failure capture (the run continues)
- Result ordering by recommendation index
- Deadline handling
- Systemic failure detection
- Fan-out sizing
"""

import asyncio

import pytest
from fakes import FakeCatalog, make_track

from podcast_playlist.application.interfaces.catalog_search import CatalogSearch
from podcast_playlist.application.services.pipeline_service import TrackResolutionPipeline
from podcast_playlist.domain.matching import Resolved
from podcast_playlist.domain.mentions import ConfidenceScorer, MentionExtractor
from podcast_playlist.domain.shared.enums import ErrorKind, UnresolvedReason
from podcast_playlist.domain.shared.exceptions import (
    CatalogHTTPError,
    ExtractionError,
    SystemicResolutionFailure,
)
from podcast_playlist.infrastructure.catalog import RateLimitedResolverClient, RollingWindowLimiter

CREEP_TRANSCRIPT = "He plays 'Creep' by Radiohead around the 10 minute mark"
REPEATED_TRANSCRIPT = "First up, Radiohead - Creep. Later we hear Creep by Radiohead again."
THREE_TRACKS = "Radiohead - Creep. Portishead - Roads. Massive Attack - Teardrop."

ALL_TRACKS = {
    ("radiohead", "creep"): [make_track("Radiohead", "Creep")],
    ("portishead", "roads"): [make_track("Portishead", "Roads")],
    ("massive attack", "teardrop"): [make_track("Massive Attack", "Teardrop")],
}


def _failing_for(failures: dict[str, Exception]):
    def on_search(artist: str, title: str) -> None:
        if artist in failures:
            raise failures[artist]

    return on_search


def _always(error: Exception):
    def on_search(artist: str, title: str) -> None:
        raise error

    return on_search


def _wrapped(backend: CatalogSearch, clock, **kwargs) -> RateLimitedResolverClient:
    limiter = kwargs.pop(
        "limiter", RollingWindowLimiter(100, 60, clock=clock, sleep=clock.sleep)
    )
    return RateLimitedResolverClient(backend, limiter=limiter, sleep=clock.sleep, **kwargs)


# =============================================================================
# End-to-end examples
# =============================================================================


class TestEndToEnd:
    def test_quoted_mention_becomes_one_recommendation(self, radiohead_catalog):
        pipeline = TrackResolutionPipeline(catalog=radiohead_catalog)

        (rec,) = pipeline.recommend(CREEP_TRANSCRIPT)

        assert (rec.artist, rec.title) == ("Radiohead", "Creep")
        assert rec.confidence >= 0.85

    def test_repeated_mention_is_deduplicated_to_max_confidence(self, radiohead_catalog):
        pipeline = TrackResolutionPipeline(catalog=radiohead_catalog)
        scored = ConfidenceScorer().score(
            MentionExtractor().extract(REPEATED_TRANSCRIPT), REPEATED_TRANSCRIPT
        )

        (rec,) = pipeline.recommend(REPEATED_TRANSCRIPT)

        assert len(scored) == 2
        assert {m.pattern_id for m in scored} == {"dash-separated", "title-by"}
        assert rec.confidence == max(m.confidence for m in scored)
        assert rec.pattern_id == "dash-separated"

    @pytest.mark.asyncio
    async def test_recommendation_resolves_against_catalog(self, radiohead_catalog):
        pipeline = TrackResolutionPipeline(catalog=radiohead_catalog)

        report = await pipeline.run(CREEP_TRANSCRIPT)

        assert len(report.recommendations) == 1
        (resolved,) = report.resolved
        assert isinstance(resolved, Resolved)
        assert resolved.similarity >= 0.75
        assert resolved.track.service_uri.startswith("spotify:track:")
        assert report.unresolved == []
        assert report.errors == []

    @pytest.mark.asyncio
    async def test_no_results_is_no_match(self):
        pipeline = TrackResolutionPipeline(catalog=FakeCatalog())

        report = await pipeline.run(THREE_TRACKS)

        assert len(report.unresolved) == 3
        assert all(u.reason == UnresolvedReason.NO_MATCH for u in report.unresolved)
        assert report.errors == []

    @pytest.mark.asyncio
    async def test_transcript_without_mentions(self):
        catalog = FakeCatalog()
        pipeline = TrackResolutionPipeline(catalog=catalog)

        report = await pipeline.run("nothing musical was said today")

        assert report.is_empty
        assert catalog.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad", ["", "   ", None])
    async def test_malformed_transcript_is_fatal(self, bad):
        pipeline = TrackResolutionPipeline(catalog=FakeCatalog())

        with pytest.raises(ExtractionError):
            await pipeline.run(bad)


# =============================================================================
# Per-item failures
# =============================================================================


class TestItemFailures:
    @pytest.mark.asyncio
    async def test_failed_item_is_recorded_and_run_continues(self):
        catalog = FakeCatalog(
            ALL_TRACKS, on_search=_failing_for({"Portishead": CatalogHTTPError(404)})
        )
        pipeline = TrackResolutionPipeline(catalog=catalog)

        report = await pipeline.run(THREE_TRACKS)

        assert [r.recommendation.artist for r in report.resolved] == ["Radiohead", "Massive Attack"]
        (failed,) = report.unresolved
        assert failed.reason == UnresolvedReason.SEARCH_FAILED
        assert failed.cause == ErrorKind.SEARCH_FAILED
        (error,) = report.errors
        assert error.index == 1
        assert error.artist == "Portishead"
        assert error.status_code == 404

    @pytest.mark.asyncio
    async def test_search_failed_from_client_carries_attempts(self, fake_clock):
        backend = FakeCatalog(
            ALL_TRACKS, on_search=_failing_for({"Portishead": CatalogHTTPError(503)})
        )
        pipeline = TrackResolutionPipeline(catalog=_wrapped(backend, fake_clock, max_retries=2))

        report = await pipeline.run(THREE_TRACKS)

        (error,) = report.errors
        assert error.kind == ErrorKind.SEARCH_FAILED
        assert error.attempts == 3
        assert error.cause == "CATALOG_HTTP_ERROR"
        assert len(report.resolved) == 2

    @pytest.mark.asyncio
    async def test_rate_limit_timeout_is_recorded(self, fake_clock):
        limiter = RollingWindowLimiter(1, 60, max_wait=0, clock=fake_clock, sleep=fake_clock.sleep)
        pipeline = TrackResolutionPipeline(
            catalog=_wrapped(FakeCatalog(ALL_TRACKS), fake_clock, limiter=limiter),
            concurrency=1,
        )

        report = await pipeline.run(THREE_TRACKS)

        assert len(report.resolved) == 1
        assert [e.kind for e in report.errors] == [ErrorKind.RATE_LIMIT_TIMEOUT] * 2
        assert all(u.cause == ErrorKind.RATE_LIMIT_TIMEOUT for u in report.unresolved)

    @pytest.mark.asyncio
    async def test_unexpected_error_does_not_abort(self):
        catalog = FakeCatalog(
            ALL_TRACKS, on_search=_failing_for({"Radiohead": RuntimeError("kaboom")})
        )
        pipeline = TrackResolutionPipeline(catalog=catalog)

        report = await pipeline.run(THREE_TRACKS)

        assert len(report.resolved) == 2
        (error,) = report.errors
        assert error.cause == "RuntimeError"
        assert error.message == "kaboom"


# =============================================================================
# Ordering and concurrency
# =============================================================================


class _ReverseSpeedCatalog(CatalogSearch):
    """Earlier searches take longer, so completions arrive in reverse order."""

    def __init__(self) -> None:
        self.completed: list[str] = []
        self._started = 0

    async def search(self, artist, title):
        delay = 10 - self._started
        self._started += 1
        for _ in range(delay):
            await asyncio.sleep(0)
        self.completed.append(artist)
        return ALL_TRACKS[(artist.lower(), title.lower())]


class TestOrdering:
    @pytest.mark.asyncio
    async def test_results_follow_recommendation_order(self):
        catalog = _ReverseSpeedCatalog()
        pipeline = TrackResolutionPipeline(catalog=catalog, concurrency=3)

        report = await pipeline.run(THREE_TRACKS)

        assert catalog.completed == ["Massive Attack", "Portishead", "Radiohead"]
        assert [r.recommendation.artist for r in report.resolved] == [
            "Radiohead",
            "Portishead",
            "Massive Attack",
        ]

    def test_concurrency_defaults_to_client_fan_out(self, fake_clock):
        client = _wrapped(FakeCatalog(), fake_clock, max_concurrency=3)

        assert TrackResolutionPipeline(catalog=client).concurrency == 3
        assert TrackResolutionPipeline(catalog=FakeCatalog()).concurrency == 5
        assert TrackResolutionPipeline(catalog=client, concurrency=1).concurrency == 1


# =============================================================================
# Deadline
# =============================================================================


class TestDeadline:
    @pytest.mark.asyncio
    async def test_unstarted_items_are_skipped_after_deadline(self, fake_clock):
        catalog = FakeCatalog(ALL_TRACKS, on_search=lambda a, t: fake_clock.advance(10))
        pipeline = TrackResolutionPipeline(catalog=catalog, concurrency=1, clock=fake_clock)

        report = await pipeline.run(THREE_TRACKS, deadline_seconds=15)

        assert len(catalog.calls) == 2
        assert [r.recommendation.artist for r in report.resolved] == ["Radiohead", "Portishead"]
        (skipped,) = report.unresolved
        assert skipped.recommendation.artist == "Massive Attack"
        assert skipped.reason == UnresolvedReason.SEARCH_FAILED
        assert skipped.cause == ErrorKind.DEADLINE_EXCEEDED
        (error,) = report.errors
        assert error.kind == ErrorKind.DEADLINE_EXCEEDED
        assert error.index == 2

    @pytest.mark.asyncio
    async def test_no_deadline_attempts_everything(self, fake_clock):
        catalog = FakeCatalog(ALL_TRACKS, on_search=lambda a, t: fake_clock.advance(1000))
        pipeline = TrackResolutionPipeline(catalog=catalog, concurrency=1, clock=fake_clock)

        report = await pipeline.run(THREE_TRACKS)

        assert len(report.resolved) == 3


# =============================================================================
# Systemic failure
# =============================================================================


class TestSystemicFailure:
    @pytest.mark.asyncio
    async def test_same_cause_everywhere_is_fatal(self, fake_clock):
        backend = FakeCatalog(ALL_TRACKS, on_search=_always(CatalogHTTPError(401)))
        pipeline = TrackResolutionPipeline(catalog=_wrapped(backend, fake_clock))

        with pytest.raises(SystemicResolutionFailure) as exc_info:
            await pipeline.run(THREE_TRACKS)

        report = exc_info.value.report
        assert len(report.unresolved) == 3
        assert report.resolved == []
        assert report.errors[-1].kind == ErrorKind.SYSTEMIC_FAILURE
        assert report.errors[-1].status_code == 401
        assert "401" in exc_info.value.cause

    @pytest.mark.asyncio
    async def test_mixed_causes_are_not_systemic(self):
        catalog = FakeCatalog(
            ALL_TRACKS,
            on_search=_failing_for(
                {
                    "Radiohead": CatalogHTTPError(401),
                    "Portishead": CatalogHTTPError(503),
                    "Massive Attack": CatalogHTTPError(503),
                }
            ),
        )
        pipeline = TrackResolutionPipeline(catalog=catalog)

        report = await pipeline.run(THREE_TRACKS)

        assert len(report.errors) == 3

    @pytest.mark.asyncio
    async def test_single_failure_is_not_systemic(self):
        catalog = FakeCatalog(
            ALL_TRACKS, on_search=_failing_for({"Radiohead": CatalogHTTPError(401)})
        )
        pipeline = TrackResolutionPipeline(catalog=catalog)

        report = await pipeline.run("Radiohead - Creep")

        assert len(report.unresolved) == 1
        assert len(report.errors) == 1

    @pytest.mark.asyncio
    async def test_one_success_prevents_systemic_failure(self):
        catalog = FakeCatalog(
            ALL_TRACKS,
            on_search=_failing_for(
                {"Radiohead": CatalogHTTPError(500), "Portishead": CatalogHTTPError(500)}
            ),
        )
        pipeline = TrackResolutionPipeline(catalog=catalog)

        report = await pipeline.run(THREE_TRACKS)

        assert len(report.resolved) == 1
        assert len(report.errors) == 2

    @pytest.mark.asyncio
    async def test_threshold_is_configurable(self):
        catalog = FakeCatalog(
            ALL_TRACKS, on_search=_failing_for({"Radiohead": CatalogHTTPError(401)})
        )
        pipeline = TrackResolutionPipeline(catalog=catalog, systemic_min_items=1)

        with pytest.raises(SystemicResolutionFailure):
            await pipeline.run("Radiohead - Creep")
