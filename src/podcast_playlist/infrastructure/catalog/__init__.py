"""Catalog search adapters: Spotify backend, rolling quota and retrying client."""

from podcast_playlist.infrastructure.catalog.rate_limiter import RollingWindowLimiter
from podcast_playlist.infrastructure.catalog.resolver_client import (
    RateLimitedResolverClient,
    backoff_delay,
)
from podcast_playlist.infrastructure.catalog.spotify_search import SpotifyCatalogSearch

__all__ = [
    "RollingWindowLimiter",
    "RateLimitedResolverClient",
    "SpotifyCatalogSearch",
    "backoff_delay",
]
