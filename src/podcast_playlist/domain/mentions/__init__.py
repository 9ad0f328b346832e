"""
Mentions Bounded Context

Turns transcript text into deduplicated, confidence-scored music recommendations.
"""

from podcast_playlist.domain.mentions.dedup import deduplicate
from podcast_playlist.domain.mentions.entities import (
    MentionCandidate,
    MusicRecommendation,
    ScoredMention,
)
from podcast_playlist.domain.mentions.extractor import MentionExtractor
from podcast_playlist.domain.mentions.patterns import (
    DEFAULT_PATTERN_LIBRARY,
    PatternLibrary,
    PatternRule,
)
from podcast_playlist.domain.mentions.scoring import ConfidenceScorer, ScoringWeights
from podcast_playlist.domain.mentions.transcript import TranscriptSegment, TranscriptText

__all__ = [
    # Entities
    "MentionCandidate",
    "ScoredMention",
    "MusicRecommendation",
    "TranscriptText",
    "TranscriptSegment",
    # Patterns
    "PatternRule",
    "PatternLibrary",
    "DEFAULT_PATTERN_LIBRARY",
    # Services
    "MentionExtractor",
    "ConfidenceScorer",
    "ScoringWeights",
    "deduplicate",
]
