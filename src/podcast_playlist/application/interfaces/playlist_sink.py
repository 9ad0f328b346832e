"""Port interface for publishing resolved tracks to a playlist."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from podcast_playlist.domain.shared.types import HttpUrlStr, NonEmptyStr

if TYPE_CHECKING:
    from ...domain.matching.entities import CatalogSearchResult


class PlaylistHandle(BaseModel):
    """Reference to a playlist created on the streaming service."""

    model_config = ConfigDict(frozen=True)

    playlist_id: NonEmptyStr
    name: NonEmptyStr
    url: HttpUrlStr | None = None


class PlaylistSink(ABC):
    """Interface for creating playlists and adding tracks to them."""

    @abstractmethod
    async def create_playlist(self, name: str, description: str) -> PlaylistHandle:
        """Create an empty playlist."""
        ...

    @abstractmethod
    async def add_tracks(self, handle: PlaylistHandle, tracks: list[CatalogSearchResult]) -> None:
        """Append tracks to a playlist, in order."""
        ...
