"""In-memory stand-ins used across the test suite."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable

from podcast_playlist.application.interfaces.catalog_search import CatalogSearch
from podcast_playlist.domain.matching.entities import CatalogSearchResult


class FakeClock:
    """Monotonic clock whose ``sleep`` advances time instantly and records delays."""

    def __init__(self, start: float = 1000.0) -> None:
        self.time = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.time

    def advance(self, seconds: float) -> None:
        self.time += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        # Yield first so tasks scheduled alongside the sleeper still see the
        # current time, the way they would on a real loop.
        await asyncio.sleep(0)
        self.time += seconds


class FakeCatalog(CatalogSearch):
    """Catalog backend answering from a dict, or raising queued errors first."""

    def __init__(
        self,
        tracks: dict[tuple[str, str], list[CatalogSearchResult]] | None = None,
        *,
        errors: Iterable[Exception] = (),
        on_search: Callable[[str, str], None] | None = None,
    ) -> None:
        self.tracks = tracks or {}
        self.errors = list(errors)
        self.calls: list[tuple[str, str]] = []
        self.closed = False
        self._on_search = on_search

    async def search(self, artist: str, title: str) -> list[CatalogSearchResult]:
        self.calls.append((artist, title))
        if self._on_search is not None:
            self._on_search(artist, title)
        await asyncio.sleep(0)
        if self.errors:
            raise self.errors.pop(0)
        return list(self.tracks.get((artist.lower(), title.lower()), []))

    async def close(self) -> None:
        self.closed = True


def make_track(
    artist: str,
    title: str,
    *,
    album: str | None = None,
    track_id: str | None = None,
) -> CatalogSearchResult:
    track_id = track_id or f"{artist}-{title}".lower().replace(" ", "")
    return CatalogSearchResult(
        artist=artist,
        title=title,
        album=album,
        service_id=track_id,
        service_uri=f"spotify:track:{track_id}",
    )
