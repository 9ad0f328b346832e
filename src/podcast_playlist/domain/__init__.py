# ruff: noqa: N999
"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting exceptions, enums and constrained types
- mentions/: Pattern library, extraction, scoring and deduplication
- matching/: Catalog result matching and run reports
"""

from podcast_playlist.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
