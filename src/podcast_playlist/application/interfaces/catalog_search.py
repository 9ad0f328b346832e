"""
Catalog Search Interface

Port interface for searching an external music catalog.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.matching.entities import CatalogSearchResult


class CatalogSearch(ABC):
    """Abstract interface for catalog track search.

    Backends report raw failures with the catalog boundary errors
    (``CatalogHTTPError``, ``CatalogTransportError``,
    ``MalformedCatalogResponse``). Wrappers that add quotas and retries raise
    ``SearchFailed`` or ``RateLimitTimeout`` instead.
    """

    @abstractmethod
    async def search(self, artist: str, title: str) -> list[CatalogSearchResult]:
        """Search for tracks matching an artist and title.

        Args:
            artist: Artist name as mentioned.
            title: Track title as mentioned.

        Returns:
            Results in the service's own relevance order (possibly empty).
        """
        ...

    async def close(self) -> None:
        """Release any held resources. Default: nothing to release."""
        return None
