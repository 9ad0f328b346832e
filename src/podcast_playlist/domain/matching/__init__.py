"""
Matching Bounded Context

Reconciles recommendations with catalog search results and models run reports.
"""

from podcast_playlist.domain.matching.entities import (
    CatalogSearchResult,
    PipelineError,
    ProcessingReport,
    ReportSummary,
    Resolved,
    TrackMatchResult,
    Unresolved,
)
from podcast_playlist.domain.matching.matcher import TrackMatcher, similarity_ratio

__all__ = [
    "CatalogSearchResult",
    "Resolved",
    "Unresolved",
    "TrackMatchResult",
    "PipelineError",
    "ProcessingReport",
    "ReportSummary",
    "TrackMatcher",
    "similarity_ratio",
]
