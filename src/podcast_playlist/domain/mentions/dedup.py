"""Deduplication of scored mentions into music recommendations."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from podcast_playlist.domain.shared.messages import LogTemplates

from .entities import MusicRecommendation, ScoredMention

logger = logging.getLogger(__name__)

Dedupable = ScoredMention | MusicRecommendation


def _display(item: Dedupable) -> tuple[str, str]:
    if isinstance(item, MusicRecommendation):
        return item.artist, item.title
    return item.artist_raw.strip(), item.title_raw.strip()


def _album(item: Dedupable) -> str | None:
    album = item.album if isinstance(item, MusicRecommendation) else item.album_raw
    return album.strip() if album and album.strip() else None


def _seconds(item: Dedupable) -> float | None:
    if isinstance(item, MusicRecommendation):
        return item.first_seen_seconds
    return item.timestamp_seconds


def _beats(challenger: Dedupable, incumbent: Dedupable) -> bool:
    """Higher confidence wins; on a tie the earlier offset wins."""
    if challenger.confidence != incumbent.confidence:
        return challenger.confidence > incumbent.confidence
    return challenger.offset < incumbent.offset


def deduplicate(items: Iterable[Dedupable]) -> list[MusicRecommendation]:
    """Merge mentions that share a normalized (artist, title) identity.

    One recommendation is emitted per identity, in order of first appearance.
    The survivor is the highest-confidence member (earliest on ties);
    ``first_offset`` is the earliest offset seen for the identity. Running the
    function on its own output returns an equal list.
    """
    groups: dict[tuple[str, str], list[Dedupable]] = {}
    count = 0
    for item in items:
        count += 1
        groups.setdefault(item.identity, []).append(item)

    recommendations = [_merge(identity, members) for identity, members in groups.items()]
    logger.debug(LogTemplates.DEDUP_COMPLETED, count, len(recommendations))
    return recommendations


def _merge(identity: tuple[str, str], members: list[Dedupable]) -> MusicRecommendation:
    survivor = members[0]
    earliest = members[0]
    for member in members[1:]:
        if _beats(member, survivor):
            survivor = member
        if member.offset < earliest.offset:
            earliest = member

    album = _album(survivor)
    if album is None:
        album = next((a for a in (_album(m) for m in members) if a is not None), None)

    artist, title = _display(survivor)
    artist_normalized, title_normalized = identity
    return MusicRecommendation(
        artist=artist,
        title=title,
        artist_normalized=artist_normalized,
        title_normalized=title_normalized,
        confidence=survivor.confidence,
        first_offset=earliest.offset,
        pattern_id=survivor.pattern_id,
        album=album,
        first_seen_seconds=_seconds(earliest),
    )
