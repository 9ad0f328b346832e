"""Command and handler for turning a transcript into a playlist of mentioned tracks."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, field_validator

from ...domain.matching.entities import ProcessingReport
from ...domain.shared.exceptions import (
    ExtractionError,
    SystemicResolutionFailure,
    TranscriptUnavailable,
)
from ...domain.shared.messages import LogTemplates
from ...domain.shared.types import NonEmptyStr, NonNegativeInt, PositiveFloat
from ..interfaces.playlist_sink import PlaylistHandle

if TYPE_CHECKING:
    from ..interfaces.playlist_sink import PlaylistSink
    from ..interfaces.transcript_source import TranscriptSource
    from ..services.pipeline_service import TrackResolutionPipeline

logger = logging.getLogger(__name__)


class BuildPlaylistStatus(Enum):
    """Status codes for build playlist results."""

    CREATED = "created"
    RESOLVED_ONLY = "resolved_only"
    NOTHING_RESOLVED = "nothing_resolved"
    TRANSCRIPT_UNAVAILABLE = "transcript_unavailable"
    EXTRACTION_FAILED = "extraction_failed"
    SYSTEMIC_FAILURE = "systemic_failure"


class BuildPlaylistCommand(BaseModel):
    """Request to extract music mentions from a transcript and publish the matches."""

    model_config = ConfigDict(frozen=True, strict=True)

    transcript_id: NonEmptyStr
    playlist_name: NonEmptyStr | None = None
    description: str = ""
    deadline_seconds: PositiveFloat | None = None

    @field_validator("transcript_id", "playlist_name", mode="before")
    @classmethod
    def _strip(cls, v: str | None) -> str | None:
        if isinstance(v, str):
            return v.strip()
        return v

    @property
    def resolved_name(self) -> str:
        return self.playlist_name or f"Music mentioned in {self.transcript_id}"


class BuildPlaylistResult(BaseModel):
    """Result of a build playlist command."""

    model_config = ConfigDict(frozen=True, strict=True)

    status: BuildPlaylistStatus
    message: str
    report: ProcessingReport | None = None
    playlist: PlaylistHandle | None = None
    tracks_added: NonNegativeInt = 0

    @property
    def is_success(self) -> bool:
        return self.status in {
            BuildPlaylistStatus.CREATED,
            BuildPlaylistStatus.RESOLVED_ONLY,
            BuildPlaylistStatus.NOTHING_RESOLVED,
        }

    @classmethod
    def error(
        cls,
        status: BuildPlaylistStatus,
        message: str,
        report: ProcessingReport | None = None,
    ) -> BuildPlaylistResult:
        return cls(status=status, message=message, report=report)


class BuildPlaylistHandler:
    """Loads a transcript, runs the pipeline and writes resolved tracks to a playlist.

    Without a sink the handler stops after resolution and returns the report.
    """

    def __init__(
        self,
        *,
        transcript_source: TranscriptSource,
        pipeline: TrackResolutionPipeline,
        playlist_sink: PlaylistSink | None = None,
    ) -> None:
        self._transcripts = transcript_source
        self._pipeline = pipeline
        self._sink = playlist_sink

    async def handle(self, command: BuildPlaylistCommand) -> BuildPlaylistResult:
        try:
            transcript = await self._transcripts.get_transcript(command.transcript_id)
        except TranscriptUnavailable as e:
            logger.warning(
                LogTemplates.PLAYLIST_TRANSCRIPT_UNAVAILABLE, command.transcript_id, e.message
            )
            return BuildPlaylistResult.error(BuildPlaylistStatus.TRANSCRIPT_UNAVAILABLE, e.message)

        try:
            report = await self._pipeline.run(
                transcript, deadline_seconds=command.deadline_seconds
            )
        except ExtractionError as e:
            return BuildPlaylistResult.error(BuildPlaylistStatus.EXTRACTION_FAILED, e.message)
        except SystemicResolutionFailure as e:
            return BuildPlaylistResult.error(
                BuildPlaylistStatus.SYSTEMIC_FAILURE, e.message, report=e.report
            )

        tracks = report.resolved_tracks
        if not tracks:
            logger.info(LogTemplates.PLAYLIST_SKIPPED_EMPTY, command.transcript_id)
            return BuildPlaylistResult(
                status=BuildPlaylistStatus.NOTHING_RESOLVED,
                message=f"No tracks resolved from {len(report.recommendations)} recommendations",
                report=report,
            )

        if self._sink is None:
            return BuildPlaylistResult(
                status=BuildPlaylistStatus.RESOLVED_ONLY,
                message=f"Resolved {len(tracks)} of {len(report.recommendations)} recommendations",
                report=report,
            )

        name = command.resolved_name
        handle = await self._sink.create_playlist(name, command.description)
        await self._sink.add_tracks(handle, tracks)
        logger.info(LogTemplates.PLAYLIST_CREATED, name, len(tracks))
        return BuildPlaylistResult(
            status=BuildPlaylistStatus.CREATED,
            message=f"Created playlist {name} with {len(tracks)} tracks",
            report=report,
            playlist=handle,
            tracks_added=len(tracks),
        )
