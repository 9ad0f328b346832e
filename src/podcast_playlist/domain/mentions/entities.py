"""Core domain entities for the mentions bounded context."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from podcast_playlist.domain.shared.types import (
    BaseWeight,
    CharOffset,
    CharSpan,
    NonEmptyStr,
    NonNegativeFloat,
    UnitInterval,
)

from .normalize import normalize_identity


class MentionCandidate(BaseModel):
    """A raw (artist, title) pairing found by one pattern at one position."""

    model_config = ConfigDict(frozen=True)

    artist_raw: str
    title_raw: str
    offset: CharOffset
    pattern_id: NonEmptyStr
    base_weight: BaseWeight
    artist_span: CharSpan
    title_span: CharSpan
    album_raw: str | None = None
    timestamp_seconds: NonNegativeFloat | None = None

    @property
    def identity(self) -> tuple[str, str]:
        return normalize_identity(self.artist_raw), normalize_identity(self.title_raw)


class ScoredMention(MentionCandidate):
    """A mention candidate with its computed confidence."""

    confidence: UnitInterval

    @classmethod
    def from_candidate(cls, candidate: MentionCandidate, confidence: float) -> ScoredMention:
        return cls(**candidate.model_dump(), confidence=confidence)


class MusicRecommendation(BaseModel):
    """A deduplicated, confidence-scored mention ready for resolution."""

    model_config = ConfigDict(frozen=True)

    artist: str
    title: str
    artist_normalized: str
    title_normalized: str
    confidence: UnitInterval
    first_offset: CharOffset
    pattern_id: NonEmptyStr
    album: str | None = None
    first_seen_seconds: NonNegativeFloat | None = None

    @property
    def identity(self) -> tuple[str, str]:
        return self.artist_normalized, self.title_normalized

    @property
    def offset(self) -> int:
        return self.first_offset

    @property
    def display_text(self) -> str:
        return f"{self.artist} - {self.title}"
