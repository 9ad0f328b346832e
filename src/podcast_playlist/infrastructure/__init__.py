"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Catalog search (Spotify Web API, request quota, retries)
- Transcript loading (plain text and timed caption files)
"""

from podcast_playlist.infrastructure.catalog import RateLimitedResolverClient, SpotifyCatalogSearch
from podcast_playlist.infrastructure.transcripts import FileTranscriptSource

__all__ = [
    "RateLimitedResolverClient",
    "SpotifyCatalogSearch",
    "FileTranscriptSource",
]
