"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from podcast_playlist.application.interfaces.catalog_search import CatalogSearch
from podcast_playlist.application.interfaces.playlist_sink import PlaylistHandle, PlaylistSink
from podcast_playlist.application.interfaces.transcript_source import TranscriptSource

__all__ = [
    "CatalogSearch",
    "PlaylistHandle",
    "PlaylistSink",
    "TranscriptSource",
]
