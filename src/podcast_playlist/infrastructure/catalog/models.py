"""Pydantic models for the Spotify Web API payloads the catalog adapter reads.

Only the fields the pipeline needs are declared; everything else in the
payload is ignored.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from podcast_playlist.domain.matching.entities import CatalogSearchResult
from podcast_playlist.domain.shared.types import NonEmptyStr, NonNegativeInt


class SpotifyTokenResponse(BaseModel):
    """Client-credentials token grant."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    access_token: NonEmptyStr
    token_type: str = "Bearer"
    expires_in: NonNegativeInt = 3600


class SpotifyArtist(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = ""


class SpotifyAlbum(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str | None = None


class SpotifyTrack(BaseModel):
    """One track object from a search page."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: NonEmptyStr
    name: str
    uri: NonEmptyStr
    artists: list[SpotifyArtist] = Field(default_factory=list)
    album: SpotifyAlbum | None = None

    @property
    def artist_names(self) -> list[str]:
        return [artist.name.strip() for artist in self.artists if artist.name.strip()]

    def to_search_result(self) -> CatalogSearchResult:
        album = self.album.name.strip() if self.album and self.album.name else None
        return CatalogSearchResult(
            artist=", ".join(self.artist_names),
            title=self.name.strip(),
            album=album or None,
            service_id=self.id,
            service_uri=self.uri,
        )


class SpotifyTrackPage(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    items: list[SpotifyTrack] = Field(default_factory=list)
    total: NonNegativeInt = 0

    @field_validator("items", mode="before")
    @classmethod
    def drop_null_items(cls, v: Any) -> Any:
        """Spotify occasionally returns ``null`` entries for unavailable tracks."""
        if isinstance(v, list):
            return [item for item in v if item is not None]
        return v


class SpotifySearchResponse(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    tracks: SpotifyTrackPage = Field(default_factory=SpotifyTrackPage)

    def to_search_results(self) -> list[CatalogSearchResult]:
        return [track.to_search_result() for track in self.tracks.items]
