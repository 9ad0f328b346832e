"""Shared fixtures: a deterministic clock and an in-memory catalog."""

from __future__ import annotations

import pytest
from fakes import FakeCatalog, FakeClock, make_track

from podcast_playlist.config.settings import clear_settings_cache


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def radiohead_catalog() -> FakeCatalog:
    return FakeCatalog(
        {("radiohead", "creep"): [make_track("Radiohead", "Creep", album="Pablo Honey")]}
    )


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Never leak cached settings between tests."""
    clear_settings_cache()
    yield
    clear_settings_cache()
