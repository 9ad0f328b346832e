"""CatalogSearch implementation backed by the Spotify Web API."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from typing import Any, Final, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from podcast_playlist.application.interfaces.catalog_search import CatalogSearch
from podcast_playlist.config.settings import CatalogSettings
from podcast_playlist.domain.matching.entities import CatalogSearchResult
from podcast_playlist.domain.shared.exceptions import (
    CatalogError,
    CatalogHTTPError,
    CatalogTransportError,
    MalformedCatalogResponse,
)
from podcast_playlist.domain.shared.messages import ErrorMessages, LogTemplates

from .models import SpotifySearchResponse, SpotifyTokenResponse
from .rate_limiter import Clock

logger = logging.getLogger(__name__)

TOKEN_EXPIRY_MARGIN: Final[int] = 30
_QUERY_UNSAFE: Final[re.Pattern[str]] = re.compile(r'[":]+')

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_retry_after(value: str | None) -> float | None:
    """Seconds from a ``Retry-After`` header; ``None`` when absent or not numeric."""
    if value is None:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    return max(0.0, seconds)


def build_query(artist: str, title: str) -> str:
    """Field-filtered search query, e.g. ``track:Creep artist:Radiohead``."""
    clean_title = " ".join(_QUERY_UNSAFE.sub(" ", title).split())
    clean_artist = " ".join(_QUERY_UNSAFE.sub(" ", artist).split())
    return f"track:{clean_title} artist:{clean_artist}"


class SpotifyCatalogSearch(CatalogSearch):
    """Searches Spotify's track index using the client-credentials flow.

    Failures are reported with the catalog boundary errors only; retries and
    quota are the caller's business (see ``RateLimitedResolverClient``). An
    expired or revoked token is refreshed once per request on a 401.
    """

    def __init__(
        self,
        settings: CatalogSettings,
        *,
        client: httpx.AsyncClient | None = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self._settings = settings
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=settings.timeout_seconds)
        self._clock = clock
        self._token: str | None = None
        self._token_expires_at = 0.0
        self._token_lock = asyncio.Lock()

    async def search(self, artist: str, title: str) -> list[CatalogSearchResult]:
        query = build_query(artist, title)
        params: dict[str, Any] = {
            "q": query,
            "type": "track",
            "limit": self._settings.search_limit,
        }
        if self._settings.market:
            params["market"] = self._settings.market

        response = await self._authorized_get(f"{self._settings.api_base_url}/search", params)
        payload = _parse(response, SpotifySearchResponse)
        results = payload.to_search_results()
        logger.debug(LogTemplates.CATALOG_SEARCH, query, len(results))
        return results

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ── HTTP helpers ────────────────────────────────────────────────

    async def _authorized_get(self, url: str, params: dict[str, Any]) -> httpx.Response:
        refreshed = False
        while True:
            token = await self._access_token()
            try:
                response = await self._client.get(
                    url, params=params, headers={"Authorization": f"Bearer {token}"}
                )
            except httpx.HTTPError as exc:
                raise CatalogTransportError(f"{type(exc).__name__}: {exc}") from exc

            if response.status_code == 401 and not refreshed:
                logger.info(LogTemplates.CATALOG_TOKEN_REJECTED)
                refreshed = True
                self._invalidate_token()
                continue

            _raise_for_status(response)
            return response

    def _invalidate_token(self) -> None:
        self._token = None
        self._token_expires_at = 0.0

    async def _access_token(self) -> str:
        async with self._token_lock:
            if self._token and self._clock() < self._token_expires_at:
                return self._token

            settings = self._settings
            if not settings.has_credentials:
                raise CatalogError(
                    ErrorMessages.CATALOG_CREDENTIALS_MISSING, code="CATALOG_CREDENTIALS_MISSING"
                )

            try:
                response = await self._client.post(
                    settings.token_url,
                    data={"grant_type": "client_credentials"},
                    auth=(
                        settings.client_id.get_secret_value(),
                        settings.client_secret.get_secret_value(),
                    ),
                )
            except httpx.HTTPError as exc:
                raise CatalogTransportError(f"{type(exc).__name__}: {exc}") from exc

            _raise_for_status(response)
            grant = _parse(response, SpotifyTokenResponse)
            self._token = grant.access_token
            self._token_expires_at = self._clock() + max(0, grant.expires_in - TOKEN_EXPIRY_MARGIN)
            logger.debug(LogTemplates.CATALOG_TOKEN_REFRESHED, grant.expires_in)
            return self._token


def _raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return
    raise CatalogHTTPError(
        response.status_code,
        retry_after=parse_retry_after(response.headers.get("Retry-After")),
    )


def _parse(response: httpx.Response, model: type[ModelT]) -> ModelT:
    try:
        data = response.json()
    except ValueError as exc:
        raise MalformedCatalogResponse(ErrorMessages.CATALOG_INVALID_JSON) from exc
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise MalformedCatalogResponse(
            ErrorMessages.CATALOG_INVALID_PAYLOAD.format(error=_describe(exc))
        ) from exc


def _describe(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()[:3]
    )
