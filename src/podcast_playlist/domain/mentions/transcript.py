"""Immutable transcript value object."""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field, model_validator

from podcast_playlist.domain.shared.types import CharOffset, NonNegativeFloat


class TranscriptSegment(BaseModel):
    """A transcript segment: where it starts in the text and in the audio."""

    model_config = ConfigDict(frozen=True)

    char_offset: CharOffset
    start_seconds: NonNegativeFloat


class TranscriptText(BaseModel):
    """Transcript text with optional per-segment timing."""

    model_config = ConfigDict(frozen=True)

    text: str
    segments: tuple[TranscriptSegment, ...] = Field(default_factory=tuple)

    @model_validator(mode="after")
    def _check_segments_ordered(self) -> TranscriptText:
        offsets = [segment.char_offset for segment in self.segments]
        if offsets != sorted(offsets):
            raise ValueError("segments must be ordered by char_offset")
        if offsets and offsets[-1] > len(self.text):
            raise ValueError("segment offset lies beyond the end of the text")
        return self

    @classmethod
    def from_segments(cls, segments: Iterable[tuple[float, str]]) -> TranscriptText:
        """Join timed caption lines into one text, one line per segment."""
        parts: list[str] = []
        timing: list[TranscriptSegment] = []
        offset = 0
        for start_seconds, line in segments:
            cleaned = line.strip()
            if not cleaned:
                continue
            timing.append(TranscriptSegment(char_offset=offset, start_seconds=start_seconds))
            parts.append(cleaned)
            offset += len(cleaned) + 1
        return cls(text="\n".join(parts), segments=tuple(timing))

    def seconds_at(self, offset: int) -> float | None:
        """Start time of the segment containing *offset*, or None without timing."""
        if not self.segments:
            return None
        index = bisect_right([s.char_offset for s in self.segments], offset) - 1
        if index < 0:
            return None
        return self.segments[index].start_seconds

    def __len__(self) -> int:
        return len(self.text)
