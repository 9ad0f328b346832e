"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across the package is defined here once,
so models can simply annotate their fields::

    from podcast_playlist.domain.shared.types import NonEmptyStr, UnitInterval

    class MyModel(BaseModel):
        title: NonEmptyStr
        confidence: UnitInterval
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

# ── Numeric constraints ─────────────────────────────────────────────

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

PositiveInt = Annotated[int, Field(gt=0)]
"""Integer > 0."""

NonNegativeFloat = Annotated[float, Field(ge=0.0)]
"""Float >= 0.0."""

PositiveFloat = Annotated[float, Field(gt=0.0)]
"""Float > 0.0."""

UnitInterval = Annotated[float, Field(ge=0.0, le=1.0)]
"""Float in [0.0, 1.0], used for confidence and similarity scores."""

BaseWeight = Annotated[float, Field(gt=0.0, le=1.0)]
"""Pattern base weight in (0.0, 1.0]."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

HttpUrlStr = Annotated[str, Field(pattern=r"^https?://")]
"""String that starts with http:// or https://."""


# ── Domain-specific constraints ─────────────────────────────────────

CharOffset = Annotated[int, Field(ge=0)]
"""Zero-based character position inside a transcript."""

CharSpan = tuple[CharOffset, CharOffset]
"""Half-open ``(start, end)`` character range inside a transcript."""

KeywordWindow = Annotated[int, Field(ge=1, le=64)]
"""Number of tokens scanned before a mention for music keywords."""

MaxConcurrency = Annotated[int, Field(ge=1, le=50)]
"""Concurrent catalog calls: 1 … 50."""

SearchLimit = Annotated[int, Field(ge=1, le=50)]
"""Catalog results requested per search: 1 … 50."""
