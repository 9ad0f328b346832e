"""Mention extraction: apply the pattern library to a transcript."""

from __future__ import annotations

import logging
import re

from podcast_playlist.domain.shared.exceptions import ExtractionError
from podcast_playlist.domain.shared.messages import ErrorMessages, LogTemplates

from .entities import MentionCandidate
from .normalize import QUOTE_CHARS, fold_quotes
from .patterns import DEFAULT_PATTERN_LIBRARY, PatternLibrary, PatternRule
from .transcript import TranscriptText

logger = logging.getLogger(__name__)


def coerce_transcript(transcript: object) -> TranscriptText:
    """Accept a TranscriptText or plain string, rejecting anything unusable."""
    if isinstance(transcript, TranscriptText):
        result = transcript
    elif isinstance(transcript, str):
        result = TranscriptText(text=transcript)
    else:
        raise ExtractionError(
            ErrorMessages.TRANSCRIPT_NOT_STRING.format(type_name=type(transcript).__name__)
        )

    if not result.text.strip():
        raise ExtractionError(ErrorMessages.TRANSCRIPT_EMPTY)
    return result


def _unquoted_span(text: str, start: int, end: int) -> tuple[int, int]:
    """Shrink a span by one character on each side when it is wrapped in quotes."""
    if end - start >= 2 and text[start] in QUOTE_CHARS and text[end - 1] == text[start]:
        return start + 1, end - 1
    return start, end


class MentionExtractor:
    """Scans transcript text and emits raw mention candidates.

    Every rule is run over the full text on its own, so overlapping matches
    from different rules are all kept. Output is ordered by offset, then by
    rule declaration order.
    """

    def __init__(self, library: PatternLibrary | None = None) -> None:
        self._library = library or DEFAULT_PATTERN_LIBRARY

    @property
    def library(self) -> PatternLibrary:
        return self._library

    def extract(self, transcript: TranscriptText | str) -> list[MentionCandidate]:
        source = coerce_transcript(transcript)
        text = fold_quotes(source.text)

        ranked: list[tuple[int, int, MentionCandidate]] = []
        for rule_index, rule in enumerate(self._library):
            for match in rule.pattern.finditer(text):
                candidate = self._to_candidate(rule, match, text, source)
                ranked.append((candidate.offset, rule_index, candidate))

        ranked.sort(key=lambda item: (item[0], item[1]))
        candidates = [candidate for _, _, candidate in ranked]

        logger.debug(LogTemplates.EXTRACTION_COMPLETED, len(candidates), len(text))
        return candidates

    @staticmethod
    def _to_candidate(
        rule: PatternRule,
        match: re.Match[str],
        text: str,
        source: TranscriptText,
    ) -> MentionCandidate:
        artist_span = _unquoted_span(text, *match.span("artist"))
        title_span = _unquoted_span(text, *match.span("title"))

        album: str | None = None
        if rule.captures_album and match.group("album") is not None:
            album_start, album_end = _unquoted_span(text, *match.span("album"))
            album = source.text[album_start:album_end]

        offset = match.start()
        return MentionCandidate(
            artist_raw=source.text[artist_span[0] : artist_span[1]],
            title_raw=source.text[title_span[0] : title_span[1]],
            offset=offset,
            pattern_id=rule.id,
            base_weight=rule.base_weight,
            artist_span=artist_span,
            title_span=title_span,
            album_raw=album,
            timestamp_seconds=source.seconds_at(offset),
        )
