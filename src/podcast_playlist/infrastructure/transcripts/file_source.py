"""TranscriptSource reading transcripts from local files.

Plain ``.txt`` files are used verbatim. ``.json`` files hold timed caption
segments, ``[{"start": 12.5, "text": "..."}, ...]``, which are joined one line
per segment so mention offsets can be mapped back to audio time.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from podcast_playlist.application.interfaces.transcript_source import TranscriptSource
from podcast_playlist.domain.mentions.transcript import TranscriptText
from podcast_playlist.domain.shared.exceptions import TranscriptUnavailable
from podcast_playlist.domain.shared.messages import ErrorMessages, LogTemplates
from podcast_playlist.domain.shared.types import NonNegativeFloat

logger = logging.getLogger(__name__)


class CaptionSegment(BaseModel):
    """One timed caption line."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    start: NonNegativeFloat = Field(default=0.0)
    text: str = ""


_SEGMENTS = TypeAdapter(list[CaptionSegment])


class FileTranscriptSource(TranscriptSource):
    """Loads transcripts by path, optionally relative to a base directory."""

    def __init__(self, base_dir: Path | str | None = None, *, encoding: str = "utf-8") -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else None
        self._encoding = encoding

    def resolve_path(self, identifier: str) -> Path:
        path = Path(identifier).expanduser()
        if self._base_dir is not None and not path.is_absolute():
            path = self._base_dir / path
        return path

    async def get_transcript(self, identifier: str) -> TranscriptText:
        path = self.resolve_path(identifier)
        if not path.is_file():
            raise TranscriptUnavailable(
                identifier, ErrorMessages.TRANSCRIPT_FILE_MISSING.format(path=path)
            )

        try:
            raw = await asyncio.to_thread(path.read_text, encoding=self._encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise TranscriptUnavailable(
                identifier, ErrorMessages.TRANSCRIPT_FILE_UNREADABLE.format(path=path, error=exc)
            ) from exc

        if path.suffix.lower() == ".json":
            return self._from_json(identifier, path, raw)
        return TranscriptText(text=raw)

    def _from_json(self, identifier: str, path: Path, raw: str) -> TranscriptText:
        try:
            segments = _SEGMENTS.validate_python(json.loads(raw))
        except (ValueError, ValidationError) as exc:
            raise TranscriptUnavailable(
                identifier, ErrorMessages.TRANSCRIPT_SEGMENTS_INVALID.format(path=path, error=exc)
            ) from exc
        logger.debug(LogTemplates.TRANSCRIPT_SEGMENTS_LOADED, len(segments), path)
        return TranscriptText.from_segments((s.start, s.text) for s in segments)
