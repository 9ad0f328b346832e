"""
Shared Domain Kernel

Contains exceptions, enums and constrained types shared across the pipeline.
"""

from podcast_playlist.domain.shared.enums import ErrorKind, MatchStatus, UnresolvedReason
from podcast_playlist.domain.shared.exceptions import (
    CatalogError,
    CatalogHTTPError,
    CatalogTransportError,
    DeadlineExceeded,
    DomainError,
    ExtractionError,
    MalformedCatalogResponse,
    RateLimitTimeout,
    SearchFailed,
    SystemicResolutionFailure,
    TranscriptUnavailable,
)

__all__ = [
    "ErrorKind",
    "MatchStatus",
    "UnresolvedReason",
    "DomainError",
    "ExtractionError",
    "TranscriptUnavailable",
    "CatalogError",
    "CatalogHTTPError",
    "CatalogTransportError",
    "MalformedCatalogResponse",
    "RateLimitTimeout",
    "SearchFailed",
    "DeadlineExceeded",
    "SystemicResolutionFailure",
]
