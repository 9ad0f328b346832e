"""Confidence scoring for mention candidates.

confidence = clamp01(base_weight + bonuses - penalties), where every term is a
declared, independent signal. Scoring is deterministic for a given transcript,
keyword set and window.
"""

from __future__ import annotations

import re
from bisect import bisect_left
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Final

from .entities import MentionCandidate, ScoredMention
from .normalize import QUOTE_CHARS, fold_quotes, normalize_identity
from .transcript import TranscriptText

DEFAULT_MUSIC_KEYWORDS: Final[tuple[str, ...]] = (
    "plays",
    "listening to",
    "track",
    "song",
    "recommend",
)
DEFAULT_KEYWORD_WINDOW: Final[int] = 8
MIN_FIELD_LENGTH: Final[int] = 2

_TOKEN: Final[re.Pattern[str]] = re.compile(r"\w+(?:'\w+)*")


@dataclass(frozen=True)
class ScoringWeights:
    """Bonus and penalty magnitudes applied on top of a pattern's base weight."""

    keyword_bonus: float = 0.10
    quoted_bonus: float = 0.05
    proper_noun_bonus: float = 0.05
    short_field_penalty: float = 0.20
    self_reference_penalty: float = 0.10


def clamp01(value: float) -> float:
    return min(1.0, max(0.0, value))


def is_proper_noun(text: str) -> bool:
    """True when every alphabetic word starts with an uppercase letter."""
    words = [word for word in text.split() if word[:1].isalpha()]
    return bool(words) and all(word[0].isupper() for word in words)


class _TokenIndex:
    """Lowercased tokens of a text with their start offsets, for window lookups."""

    def __init__(self, text: str) -> None:
        matches = list(_TOKEN.finditer(text))
        self.starts = [m.start() for m in matches]
        self.ends = [m.end() for m in matches]
        self.tokens = [m.group().lower() for m in matches]

    def before(self, offset: int, window: int) -> list[str]:
        """The last *window* tokens that end at or before *offset*."""
        stop = bisect_left(self.starts, offset)
        while stop > 0 and self.ends[stop - 1] > offset:
            stop -= 1
        return self.tokens[max(0, stop - window) : stop]


def _contains_phrase(tokens: Sequence[str], phrase: Sequence[str]) -> bool:
    width = len(phrase)
    return any(list(tokens[i : i + width]) == list(phrase) for i in range(len(tokens) - width + 1))


class ConfidenceScorer:
    """Computes a normalized confidence for each mention candidate."""

    def __init__(
        self,
        *,
        keywords: Iterable[str] = DEFAULT_MUSIC_KEYWORDS,
        keyword_window: int = DEFAULT_KEYWORD_WINDOW,
        weights: ScoringWeights | None = None,
    ) -> None:
        self._keyword_phrases = tuple(
            tuple(_TOKEN.findall(keyword.lower())) for keyword in keywords if keyword.strip()
        )
        self._window = keyword_window
        self._weights = weights or ScoringWeights()

    def score(self, candidates: Iterable[MentionCandidate], transcript: TranscriptText | str) -> list[ScoredMention]:
        """Score candidates extracted from *transcript*, preserving their order."""
        raw_text = transcript.text if isinstance(transcript, TranscriptText) else transcript
        text = fold_quotes(raw_text)
        index = _TokenIndex(text)
        return [
            ScoredMention.from_candidate(candidate, self.confidence(candidate, text, index))
            for candidate in candidates
        ]

    def confidence(
        self,
        candidate: MentionCandidate,
        text: str,
        index: _TokenIndex | None = None,
    ) -> float:
        w = self._weights
        index = index or _TokenIndex(text)
        total = candidate.base_weight

        if self._has_keyword_before(candidate.offset, index):
            total += w.keyword_bonus
        if _is_quoted(text, candidate.artist_span) and _is_quoted(text, candidate.title_span):
            total += w.quoted_bonus
        if is_proper_noun(candidate.artist_raw):
            total += w.proper_noun_bonus

        artist = candidate.artist_raw.strip()
        title = candidate.title_raw.strip()
        if len(artist) < MIN_FIELD_LENGTH or len(title) < MIN_FIELD_LENGTH:
            total -= w.short_field_penalty
        if artist and normalize_identity(artist) == normalize_identity(title):
            total -= w.self_reference_penalty

        return round(clamp01(total), 6)

    def _has_keyword_before(self, offset: int, index: _TokenIndex) -> bool:
        tokens = index.before(offset, self._window)
        return any(_contains_phrase(tokens, phrase) for phrase in self._keyword_phrases)


def _is_quoted(text: str, span: tuple[int, int]) -> bool:
    start, end = span
    return start > 0 and end < len(text) and text[start - 1] in QUOTE_CHARS and text[end] in QUOTE_CHARS
