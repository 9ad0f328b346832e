"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the catalog client, the pipeline and its
handlers. Components are created on-demand and cached for reuse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from ..application.commands.build_playlist import BuildPlaylistHandler
    from ..application.interfaces.catalog_search import CatalogSearch
    from ..application.interfaces.playlist_sink import PlaylistSink
    from ..application.interfaces.transcript_source import TranscriptSource
    from ..application.services.pipeline_service import TrackResolutionPipeline
    from ..domain.matching.matcher import TrackMatcher
    from ..domain.mentions.extractor import MentionExtractor
    from ..domain.mentions.scoring import ConfidenceScorer
    from ..infrastructure.catalog.resolver_client import RateLimitedResolverClient
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed. ``catalog_backend``
    can be replaced before first use to run the pipeline against another
    catalog (tests use an in-memory fake).
    """

    settings: Settings

    # Infrastructure adapters
    _catalog_backend: CatalogSearch | None = None
    _resolver_client: RateLimitedResolverClient | None = None
    _transcript_source: TranscriptSource | None = None

    # Domain services
    _extractor: MentionExtractor | None = None
    _scorer: ConfidenceScorer | None = None
    _matcher: TrackMatcher | None = None

    # Application services
    _pipeline: TrackResolutionPipeline | None = None

    # Command handlers
    _build_playlist_handler: BuildPlaylistHandler | None = None

    def set_catalog_backend(self, backend: CatalogSearch) -> None:
        """Use *backend* as the raw catalog instead of the Spotify adapter."""
        if self._resolver_client is not None:
            raise RuntimeError("Catalog backend already in use; set it before first access.")
        self._catalog_backend = backend

    # === Infrastructure Adapters ===

    @property
    def catalog_backend(self) -> CatalogSearch:
        """Get the raw catalog search backend."""
        if self._catalog_backend is None:
            from ..infrastructure.catalog.spotify_search import SpotifyCatalogSearch

            self._catalog_backend = SpotifyCatalogSearch(self.settings.catalog)
        return self._catalog_backend

    @property
    def resolver_client(self) -> RateLimitedResolverClient:
        """Get the quota- and retry-aware catalog client."""
        if self._resolver_client is None:
            from ..infrastructure.catalog.resolver_client import RateLimitedResolverClient

            self._resolver_client = RateLimitedResolverClient.from_settings(
                self.catalog_backend, self.settings.resolver
            )
        return self._resolver_client

    @property
    def transcript_source(self) -> TranscriptSource:
        """Get the transcript source."""
        if self._transcript_source is None:
            from ..infrastructure.transcripts.file_source import FileTranscriptSource

            self._transcript_source = FileTranscriptSource()
        return self._transcript_source

    # === Domain Services ===

    @property
    def extractor(self) -> MentionExtractor:
        """Get the mention extractor, minus any disabled patterns."""
        if self._extractor is None:
            from ..domain.mentions.extractor import MentionExtractor
            from ..domain.mentions.patterns import DEFAULT_PATTERN_LIBRARY

            disabled = self.settings.extraction.disabled_patterns
            self._extractor = MentionExtractor(DEFAULT_PATTERN_LIBRARY.without(*disabled))
        return self._extractor

    @property
    def scorer(self) -> ConfidenceScorer:
        """Get the confidence scorer."""
        if self._scorer is None:
            from ..domain.mentions.scoring import ConfidenceScorer, ScoringWeights

            scoring = self.settings.scoring
            self._scorer = ConfidenceScorer(
                keywords=self.settings.extraction.keywords,
                keyword_window=self.settings.extraction.keyword_window,
                weights=ScoringWeights(
                    keyword_bonus=scoring.keyword_bonus,
                    quoted_bonus=scoring.quoted_bonus,
                    proper_noun_bonus=scoring.proper_noun_bonus,
                    short_field_penalty=scoring.short_field_penalty,
                    self_reference_penalty=scoring.self_reference_penalty,
                ),
            )
        return self._scorer

    @property
    def matcher(self) -> TrackMatcher:
        """Get the track matcher."""
        if self._matcher is None:
            from ..domain.matching.matcher import TrackMatcher

            matcher = self.settings.matcher
            self._matcher = TrackMatcher(
                threshold=matcher.threshold,
                artist_weight=matcher.artist_weight,
                title_weight=matcher.title_weight,
                album_bonus=matcher.album_bonus,
            )
        return self._matcher

    # === Application Services ===

    @property
    def pipeline(self) -> TrackResolutionPipeline:
        """Get the track resolution pipeline."""
        if self._pipeline is None:
            from ..application.services.pipeline_service import TrackResolutionPipeline

            self._pipeline = TrackResolutionPipeline(
                catalog=self.resolver_client,
                matcher=self.matcher,
                extractor=self.extractor,
                scorer=self.scorer,
                concurrency=self.settings.resolver.max_concurrency,
                systemic_min_items=self.settings.pipeline.systemic_min_items,
            )
        return self._pipeline

    # === Command Handlers ===

    @property
    def build_playlist_handler(self) -> BuildPlaylistHandler:
        """Get the build playlist handler (no playlist sink; report only)."""
        if self._build_playlist_handler is None:
            self._build_playlist_handler = self.create_build_playlist_handler(None)
        return self._build_playlist_handler

    def create_build_playlist_handler(
        self, playlist_sink: PlaylistSink | None
    ) -> BuildPlaylistHandler:
        """Build a handler publishing to *playlist_sink*."""
        from ..application.commands.build_playlist import BuildPlaylistHandler

        return BuildPlaylistHandler(
            transcript_source=self.transcript_source,
            pipeline=self.pipeline,
            playlist_sink=playlist_sink,
        )

    # === Lifecycle ===

    async def shutdown(self) -> None:
        """Shutdown and cleanup all resources."""
        client = self._resolver_client or self._catalog_backend
        if client is not None:
            try:
                await client.close()
            except Exception as exc:
                logger.warning(LogTemplates.CONTAINER_SHUTDOWN_FAILED, "catalog client", exc)

        self._resolver_client = None
        self._catalog_backend = None
        self._pipeline = None
        self._build_playlist_handler = None


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
