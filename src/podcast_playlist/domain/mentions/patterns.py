"""Declarative table of mention patterns.

Each rule pairs a compiled regex exposing ``artist`` and ``title`` named groups
(and optionally ``album``) with a base weight. Rules are evaluated independently
against the whole transcript; their declaration order breaks offset ties.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Final

# ── Building blocks ─────────────────────────────────────────────────────

# Capitalized words that introduce a song rather than belong to its name.
_LEAD_INS: Final[tuple[str, ...]] = (
    "Playing", "Listening", "Hearing", "Spinning", "Featuring", "Including", "Starting",
    "Next", "Later", "Finally",
)

_ARTIST_FILLERS: Final[tuple[str, ...]] = _LEAD_INS + (
    "He", "She", "It", "We", "They", "I", "That", "This", "There", "Here", "What",
    "Who", "Where", "Let", "Then", "And", "But", "So", "Also", "Now", "Yeah", "Oh",
    "Well", "Okay", "Um", "Uh",
)

_TITLE_FILLERS: Final[tuple[str, ...]] = _LEAD_INS + (
    "He", "She", "It", "We", "They", "Then", "And", "But", "So", "Also", "Now",
    "Yeah", "Oh", "Well", "Okay", "Um", "Uh",
)

_ARTIST_CONNECTORS: Final[tuple[str, ...]] = (
    "of", "the", "and", "&", "n'", "de", "la", "le", "el", "los", "las", "del",
    "da", "von", "van", "der", "y",
)

_TITLE_CONNECTORS: Final[tuple[str, ...]] = _ARTIST_CONNECTORS + (
    "a", "an", "in", "on", "to", "for", "with", "at", "me", "my", "you", "your",
    "is", "it", "be", "up", "no", "or",
)

# A capitalized word; periods only inside ("R.E.M"), apostrophes only before letters.
_WORD: Final[str] = r"[A-Z0-9À-ÖØ-Þ](?:[\w!+/&-]|\.(?=\w))*(?:'\w+)*"

# Straight quotes only; typographic quotes are folded before matching.
QUOTED: Final[str] = r"""(?<!\w)(?:"[^"\n]{1,200}"|'(?:[^'\n]|'(?=\w)){1,200}?'(?!\w))"""

_GAP: Final[str] = r"[ \t]+"


def _alternation(words: Iterable[str]) -> str:
    return "|".join(re.escape(word) for word in words)


def capitalized_name(fillers: Iterable[str], connectors: Iterable[str]) -> str:
    """Regex for a run of capitalized words joined by lowercase connectors."""
    return (
        rf"(?<![\w'])(?!(?:{_alternation(fillers)})\b)(?=\S*[^\W\d_])"
        rf"{_WORD}(?:{_GAP}(?:(?:{_alternation(connectors)}){_GAP})*{_WORD})*"
    )


ARTIST_NAME: Final[str] = capitalized_name(_ARTIST_FILLERS, _ARTIST_CONNECTORS)
TITLE_NAME: Final[str] = capitalized_name(_TITLE_FILLERS, _TITLE_CONNECTORS)

_BY: Final[str] = rf"{_GAP}(?i:by){_GAP}"
_DASH: Final[str] = rf"{_GAP}[-–—]{_GAP}"
_ALBUM_TAIL: Final[str] = (
    rf"(?:{_GAP}(?i:(?:off|from){_GAP}(?:the|their|his|her){_GAP}(?:album|record|lp))"
    rf"{_GAP}(?P<album>{QUOTED}|{TITLE_NAME}))?"
)


# ── Rules ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class PatternRule:
    """A single mention pattern: id, matcher and base weight in (0, 1]."""

    id: str
    pattern: re.Pattern[str]
    base_weight: float
    description: str = ""

    def __post_init__(self) -> None:
        if not 0.0 < self.base_weight <= 1.0:
            raise ValueError(f"base_weight for {self.id!r} must be in (0, 1]")
        missing = {"artist", "title"} - set(self.pattern.groupindex)
        if missing:
            raise ValueError(f"pattern {self.id!r} lacks named groups: {sorted(missing)}")

    @classmethod
    def compile(cls, id: str, regex: str, base_weight: float, description: str = "") -> PatternRule:
        return cls(id=id, pattern=re.compile(regex), base_weight=base_weight, description=description)

    @property
    def captures_album(self) -> bool:
        return "album" in self.pattern.groupindex


QUOTED_BY: Final[PatternRule] = PatternRule.compile(
    "quoted-by",
    rf"(?P<title>{QUOTED}),?{_BY}(?P<artist>{QUOTED}|{ARTIST_NAME}){_ALBUM_TAIL}",
    0.9,
    '"<title>" by <artist>',
)

DASH_SEPARATED: Final[PatternRule] = PatternRule.compile(
    "dash-separated",
    rf"(?P<artist>{QUOTED}|{ARTIST_NAME}){_DASH}(?P<title>{QUOTED}|{TITLE_NAME})",
    0.7,
    "<artist> - <title>",
)

POSSESSIVE: Final[PatternRule] = PatternRule.compile(
    "possessive",
    rf"(?P<artist>{ARTIST_NAME})'s{_GAP}(?P<title>{QUOTED}|{TITLE_NAME})",
    0.6,
    "<artist>'s <title>",
)

LABELED: Final[PatternRule] = PatternRule.compile(
    "labeled",
    rf"(?<!\w)(?i:artist)[ \t]*:?[ \t]*(?P<artist>{QUOTED})[ \t]*[,;]?[ \t]*"
    rf"(?:(?i:and){_GAP})?(?:(?i:the){_GAP})?(?i:song|track|title)[ \t]*:?[ \t]*"
    rf"(?P<title>{QUOTED})",
    0.95,
    'artist "<artist>" song "<title>"',
)

TITLE_BY: Final[PatternRule] = PatternRule.compile(
    "title-by",
    rf"(?P<title>{TITLE_NAME}){_BY}(?P<artist>{ARTIST_NAME})",
    0.5,
    "<Title> by <Artist>, unquoted",
)


class PatternLibrary:
    """Ordered, immutable collection of pattern rules."""

    def __init__(self, rules: Iterable[PatternRule]) -> None:
        self._rules: tuple[PatternRule, ...] = tuple(rules)
        ids = [rule.id for rule in self._rules]
        if len(ids) != len(set(ids)):
            raise ValueError("pattern rule ids must be unique")

    def __iter__(self) -> Iterator[PatternRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(rule.id for rule in self._rules)

    def get(self, rule_id: str) -> PatternRule | None:
        for rule in self._rules:
            if rule.id == rule_id:
                return rule
        return None

    def with_rule(self, rule: PatternRule) -> PatternLibrary:
        """Return a new library with *rule* appended."""
        return PatternLibrary((*self._rules, rule))

    def without(self, *rule_ids: str) -> PatternLibrary:
        """Return a new library without the given rule ids."""
        return PatternLibrary(rule for rule in self._rules if rule.id not in rule_ids)


DEFAULT_PATTERN_LIBRARY: Final[PatternLibrary] = PatternLibrary(
    (QUOTED_BY, DASH_SEPARATED, POSSESSIVE, LABELED, TITLE_BY)
)
