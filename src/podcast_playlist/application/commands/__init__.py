"""
Application Commands

Command objects and their handlers for write operations.
Commands represent intent to change the system state.
"""

from podcast_playlist.application.commands.build_playlist import (
    BuildPlaylistCommand,
    BuildPlaylistHandler,
    BuildPlaylistResult,
    BuildPlaylistStatus,
)

__all__ = [
    "BuildPlaylistCommand",
    "BuildPlaylistHandler",
    "BuildPlaylistResult",
    "BuildPlaylistStatus",
]
