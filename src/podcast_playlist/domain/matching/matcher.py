"""Fuzzy matching of a recommendation against catalog search results."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from difflib import SequenceMatcher
from typing import Final

from podcast_playlist.domain.mentions.entities import MusicRecommendation
from podcast_playlist.domain.mentions.normalize import match_key, strip_catalog_noise
from podcast_playlist.domain.shared.enums import UnresolvedReason
from podcast_playlist.domain.shared.messages import LogTemplates

from .entities import CatalogSearchResult, Resolved, TrackMatchResult, Unresolved

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD: Final[float] = 0.75
DEFAULT_ARTIST_WEIGHT: Final[float] = 0.45
DEFAULT_TITLE_WEIGHT: Final[float] = 0.55
DEFAULT_ALBUM_BONUS: Final[float] = 0.05
ALBUM_MATCH_RATIO: Final[float] = 0.9


def similarity_ratio(left: str, right: str) -> float:
    """Normalized [0, 1] closeness of two strings, tolerant of case, accents and punctuation."""
    a, b = match_key(left), match_key(right)
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0
    return SequenceMatcher(None, a, b).ratio()


def _artist_similarity(wanted: str, candidate: str) -> float:
    # Catalogs list collaborators as "Main, Featured"; the main artist alone may match.
    parts = [candidate, *(part for part in candidate.split(", ") if part)]
    return max(similarity_ratio(wanted, part) for part in parts)


def _title_similarity(wanted: str, candidate: str) -> float:
    return max(
        similarity_ratio(wanted, candidate),
        similarity_ratio(wanted, strip_catalog_noise(candidate)),
    )


class TrackMatcher:
    """Ranks search results for a recommendation and picks the best one above a threshold."""

    def __init__(
        self,
        *,
        threshold: float = DEFAULT_THRESHOLD,
        artist_weight: float = DEFAULT_ARTIST_WEIGHT,
        title_weight: float = DEFAULT_TITLE_WEIGHT,
        album_bonus: float = DEFAULT_ALBUM_BONUS,
    ) -> None:
        self._threshold = threshold
        self._artist_weight = artist_weight
        self._title_weight = title_weight
        self._album_bonus = album_bonus

    @property
    def threshold(self) -> float:
        return self._threshold

    def similarity(self, recommendation: MusicRecommendation, result: CatalogSearchResult) -> float:
        score = self._artist_weight * _artist_similarity(recommendation.artist, result.artist)
        score += self._title_weight * _title_similarity(recommendation.title, result.title)
        if (
            recommendation.album
            and result.album
            and similarity_ratio(recommendation.album, result.album) >= ALBUM_MATCH_RATIO
        ):
            score += self._album_bonus
        return round(min(1.0, max(0.0, score)), 6)

    def match(
        self,
        recommendation: MusicRecommendation,
        results: Sequence[CatalogSearchResult],
    ) -> TrackMatchResult:
        """Return Resolved for the best result at or above the threshold, else Unresolved."""
        best: CatalogSearchResult | None = None
        best_score = 0.0
        for result in results:
            score = self.similarity(recommendation, result)
            # Strictly greater: the service's own ranking breaks ties.
            if best is None or score > best_score:
                best, best_score = result, score

        if best is not None and best_score >= self._threshold:
            logger.debug(
                LogTemplates.MATCH_RESOLVED,
                recommendation.artist,
                recommendation.title,
                best.service_uri,
                best_score,
            )
            return Resolved(recommendation=recommendation, track=best, similarity=best_score)

        logger.debug(
            LogTemplates.MATCH_NO_MATCH, recommendation.artist, recommendation.title, best_score
        )
        return Unresolved(
            recommendation=recommendation,
            reason=UnresolvedReason.NO_MATCH,
            best_similarity=best_score if best is not None else None,
        )
