"""Core domain entities for the matching bounded context."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from podcast_playlist.domain.mentions.entities import MusicRecommendation
from podcast_playlist.domain.shared.enums import ErrorKind, MatchStatus, UnresolvedReason
from podcast_playlist.domain.shared.types import NonEmptyStr, NonNegativeInt, PositiveInt, UnitInterval


class CatalogSearchResult(BaseModel):
    """A track returned by the external catalog search. Read-only to the pipeline."""

    model_config = ConfigDict(frozen=True)

    artist: str
    title: str
    album: str | None = None
    service_id: NonEmptyStr
    service_uri: NonEmptyStr

    @property
    def display_text(self) -> str:
        return f"{self.artist} - {self.title}"


class Resolved(BaseModel):
    """A recommendation confirmed against a catalog track."""

    model_config = ConfigDict(frozen=True)

    status: Literal[MatchStatus.RESOLVED] = MatchStatus.RESOLVED
    recommendation: MusicRecommendation
    track: CatalogSearchResult
    similarity: UnitInterval


class Unresolved(BaseModel):
    """A recommendation that could not be confirmed, and why."""

    model_config = ConfigDict(frozen=True)

    status: Literal[MatchStatus.UNRESOLVED] = MatchStatus.UNRESOLVED
    recommendation: MusicRecommendation
    reason: UnresolvedReason
    cause: ErrorKind | None = None
    best_similarity: UnitInterval | None = None


TrackMatchResult = Annotated[Resolved | Unresolved, Field(discriminator="status")]


class PipelineError(BaseModel):
    """Structured, log-worthy error recorded for a run."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str
    index: NonNegativeInt | None = None
    artist: str | None = None
    title: str | None = None
    cause: str | None = None
    status_code: int | None = None
    attempts: PositiveInt | None = None

    @property
    def cause_key(self) -> tuple[str, str | None, int | None]:
        """What two errors must share to count as the same root cause."""
        return self.kind.value, self.cause, self.status_code


class ReportSummary(BaseModel):
    """Headline counts for a processing report."""

    model_config = ConfigDict(frozen=True)

    recommendations: NonNegativeInt
    resolved: NonNegativeInt
    unresolved: NonNegativeInt
    no_match: NonNegativeInt
    search_failed: NonNegativeInt
    errors: NonNegativeInt


class ProcessingReport(BaseModel):
    """The sole output of a pipeline run."""

    model_config = ConfigDict(frozen=True)

    recommendations: list[MusicRecommendation] = Field(default_factory=list)
    resolved: list[Resolved] = Field(default_factory=list)
    unresolved: list[Unresolved] = Field(default_factory=list)
    errors: list[PipelineError] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.recommendations

    @property
    def resolved_tracks(self) -> list[CatalogSearchResult]:
        return [result.track for result in self.resolved]

    def summary(self) -> ReportSummary:
        return ReportSummary(
            recommendations=len(self.recommendations),
            resolved=len(self.resolved),
            unresolved=len(self.unresolved),
            no_match=sum(1 for u in self.unresolved if u.reason == UnresolvedReason.NO_MATCH),
            search_failed=sum(
                1 for u in self.unresolved if u.reason == UnresolvedReason.SEARCH_FAILED
            ),
            errors=len(self.errors),
        )
