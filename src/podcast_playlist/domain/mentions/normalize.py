"""Pure-function utilities for normalizing artist and title strings."""

from __future__ import annotations

import re
import string
import unicodedata
from typing import Final

# ── Precompiled patterns ────────────────────────────────────────────────

_QUOTE_FOLD_TABLE: Final[dict[int, str]] = str.maketrans(
    {
        "‘": "'",  # left single
        "’": "'",  # right single / apostrophe
        "‚": "'",
        "‛": "'",
        "“": '"',  # left double
        "”": '"',  # right double
        "„": '"',
        "‟": '"',
    }
)

QUOTE_CHARS: Final[frozenset[str]] = frozenset({'"', "'"})

_WHITESPACE_RUN: Final[re.Pattern[str]] = re.compile(r"\s+")

_EDGE_PUNCTUATION: Final[str] = string.punctuation + string.whitespace + "‘’“”"

_INNER_PUNCTUATION: Final[re.Pattern[str]] = re.compile(r"[^\w\s]")

_CATALOG_NOISE_PATTERNS: Final[list[re.Pattern[str]]] = [
    re.compile(
        r"\s*[\[\(](official\s*(video|audio|music\s*video|lyric\s*video|visualizer))\s*[\]\)]",
        re.IGNORECASE,
    ),
    re.compile(r"\s*[\[\(](lyrics?|with\s*lyrics?)\s*[\]\)]", re.IGNORECASE),
    re.compile(r"\s*[\[\(](\d{4}\s*)?(remaster(ed)?|remix)(\s*\d{4})?(\s*version)?\s*[\]\)]", re.IGNORECASE),
    re.compile(r"\s*[\[\(](ft\.?|feat\.?|featuring)\s+[^\]\)]+[\]\)]", re.IGNORECASE),
    re.compile(r"\s+-\s+(\d{4}\s+)?remaster(ed)?(\s+\d{4})?(\s+version)?\s*$", re.IGNORECASE),
]


def fold_quotes(text: str) -> str:
    """Replace typographic quotes with their ASCII counterparts.

    The replacement is one character for one character, so offsets computed
    on the folded text are valid for the original.
    """
    return text.translate(_QUOTE_FOLD_TABLE)


def normalize_identity(text: str) -> str:
    """Normalize an artist or title for identity comparison.

    Case-folds, collapses internal whitespace and strips leading/trailing
    punctuation. Internal punctuation (``AC/DC``) is kept.
    """
    collapsed = _WHITESPACE_RUN.sub(" ", fold_quotes(text).casefold())
    return collapsed.strip(_EDGE_PUNCTUATION)


def strip_catalog_noise(title: str) -> str:
    """Remove catalog decorations like "(Remastered 2009)" or "[Official Video]"."""
    result = title
    for pattern in _CATALOG_NOISE_PATTERNS:
        result = pattern.sub("", result)
    return result.strip()


def match_key(text: str) -> str:
    """Aggressive normalization for fuzzy comparison.

    Accents are folded, all punctuation is dropped and a leading "the " is
    removed, so "The Beatles" and "Beatles" compare equal.
    """
    decomposed = unicodedata.normalize("NFKD", normalize_identity(text))
    ascii_only = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    without_punct = _INNER_PUNCTUATION.sub(" ", ascii_only.replace("&", " and "))
    key = _WHITESPACE_RUN.sub(" ", without_punct).strip()
    if key.startswith("the "):
        key = key[4:]
    return key
