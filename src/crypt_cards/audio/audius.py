"""Audius track search client.

Soundtracks are decoration only: every failure is logged and yields an
empty result instead of an exception.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from crypt_cards.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_HOST = "https://api.audius.co"
DEFAULT_APP_NAME = "CRYPT"
DEFAULT_SEARCH_LIMIT = 5
DEFAULT_TRENDING_LIMIT = 10
DEFAULT_REQUEST_TIMEOUT = 15.0


class AudiusClientError(Exception):
    """Base exception for Audius client errors."""


@dataclass(frozen=True)
class Track:
    """A streamable Audius track."""

    id: str
    title: str
    artist: str
    duration: int
    stream_url: str
    artwork: str | None = None
    artwork_large: str | None = None
    plays: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, host: str, app_name: str) -> Track:
        """Create a Track from an Audius API record."""
        track_id = str(data["id"])
        artwork = data.get("artwork") or {}
        user = data.get("user") or {}
        small = artwork.get("150x150")
        return cls(
            id=track_id,
            title=str(data.get("title", "")),
            artist=str(user.get("name", "")),
            duration=int(data.get("duration") or 0),
            stream_url=f"{host}/v1/tracks/{track_id}/stream?app_name={app_name}",
            artwork=small,
            artwork_large=artwork.get("480x480") or small,
            plays=int(data.get("play_count") or 0),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "duration": self.duration,
            "stream_url": self.stream_url,
            "artwork": self.artwork,
            "plays": self.plays,
        }


class AudiusClient:
    """Audius public API client for track search and trending lists.

    Example:
        ```python
        client = AudiusClient()
        tracks = await client.search_tracks("lo-fi", limit=8)
        await client.close()
        ```
    """

    def __init__(
        self,
        *,
        host: str = DEFAULT_HOST,
        app_name: str = DEFAULT_APP_NAME,
        http: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        """Initialize the Audius client.

        Args:
            host: API host.
            app_name: app_name query parameter.
            http: Optional shared httpx client.
            timeout: Request timeout in seconds.
        """
        self._host = host.rstrip("/")
        self._app_name = app_name
        self._http = http or httpx.AsyncClient(timeout=timeout)
        self._owns_http = http is None

    @classmethod
    def from_settings(cls, settings: Settings) -> AudiusClient:
        """Build a client from application settings."""
        return cls(host=settings.audius.host, app_name=settings.audius.app_name)

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> AudiusClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _get_tracks(self, path: str, params: dict[str, Any], limit: int) -> list[Track]:
        try:
            response = await self._http.get(
                f"{self._host}{path}", params={**params, "app_name": self._app_name}
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise AudiusClientError(f"Audius request {path} failed: {e}") from e

        records = payload.get("data") if isinstance(payload, dict) else None
        tracks: list[Track] = []
        for record in (records or [])[:limit]:
            try:
                tracks.append(Track.from_dict(record, host=self._host, app_name=self._app_name))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.debug("Skipping malformed Audius track: %s", e)
        return tracks

    async def search_tracks(self, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> list[Track]:
        """Search tracks by free-text query.

        Returns:
            Up to ``limit`` tracks; empty on any failure.
        """
        try:
            return await self._get_tracks("/v1/tracks/search", {"query": query}, limit)
        except AudiusClientError as e:
            logger.warning("Audius search failed for %r: %s", query, e)
            return []

    async def get_trending(self, limit: int = DEFAULT_TRENDING_LIMIT) -> list[Track]:
        """Fetch the trending tracks.

        Returns:
            Up to ``limit`` tracks; empty on any failure.
        """
        try:
            return await self._get_tracks("/v1/tracks/trending", {}, limit)
        except AudiusClientError as e:
            logger.warning("Audius trending failed: %s", e)
            return []
