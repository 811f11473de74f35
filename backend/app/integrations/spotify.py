"""Spotify Web API client used as the album catalog.

Only catalog lookups are needed, so the client-credentials flow is
enough: no user authorization is involved.
"""
import time
from datetime import date
from typing import List, Optional

import httpx

from app.config import get_settings
from app.exceptions import CatalogError, NotFoundError
from app.schemas.album import CatalogAlbum


class SpotifyCatalog:
    """Resolves Spotify album ids to album metadata."""

    API_URL = "https://api.spotify.com/v1"
    TOKEN_URL = "https://accounts.spotify.com/api/token"

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        settings = get_settings()
        self._client_id = settings.spotify_client_id
        self._client_secret = settings.spotify_client_secret
        self._market = settings.spotify_market
        self._client = client or httpx.AsyncClient(timeout=15.0)
        self._access_token: Optional[str] = None
        self._token_expiry: float = 0

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def get_album(self, catalog_id: str) -> CatalogAlbum:
        """Get album metadata by Spotify id."""
        data = await self._request(f"albums/{catalog_id}", {"market": self._market})
        return self._parse_album(data)

    async def search_albums(self, query: str, limit: int = 20) -> List[CatalogAlbum]:
        """Search the catalog for albums."""
        data = await self._request("search", {
            "q": query,
            "type": "album",
            "limit": limit,
            "market": self._market,
        })
        return [self._parse_album(item) for item in data.get("albums", {}).get("items", [])]

    async def _ensure_token(self) -> None:
        """Fetch a client-credentials token if the current one is missing or stale."""
        if self._access_token and time.time() < self._token_expiry:
            return

        if not self._client_id or not self._client_secret:
            raise CatalogError(
                "Spotify credentials not configured. "
                "Set SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET."
            )

        response = await self._client.post(
            self.TOKEN_URL,
            data={"grant_type": "client_credentials"},
            auth=(self._client_id, self._client_secret),
        )
        if response.status_code != 200:
            raise CatalogError(f"Spotify token request failed: {response.text}")

        data = response.json()
        self._access_token = data["access_token"]
        # Refresh a minute before the advertised expiry
        self._token_expiry = time.time() + data.get("expires_in", 3600) - 60

    async def _request(self, endpoint: str, params: Optional[dict] = None) -> dict:
        await self._ensure_token()
        try:
            response = await self._client.get(
                f"{self.API_URL}/{endpoint}",
                params=params or {},
                headers={"Authorization": f"Bearer {self._access_token}"},
            )
        except httpx.HTTPError as e:
            raise CatalogError(f"Spotify request failed: {e}") from e

        if response.status_code in (400, 404):
            raise NotFoundError("Album not found in catalog")
        if response.status_code != 200:
            raise CatalogError(f"Spotify request failed: {response.status_code} {response.text}")
        return response.json()

    @staticmethod
    def _parse_album(item: dict) -> CatalogAlbum:
        images = item.get("images") or []
        return CatalogAlbum(
            catalog_id=item["id"],
            name=item.get("name", ""),
            artist=", ".join(a.get("name", "") for a in item.get("artists", [])) or "Unknown Artist",
            release_date=parse_release_date(item.get("release_date")),
            image_url=images[0]["url"] if images else None,
            external_url=(item.get("external_urls") or {}).get("spotify"),
        )


def parse_release_date(value: Optional[str]) -> Optional[date]:
    """Parse Spotify's year / year-month / full date release strings."""
    if not value:
        return None
    parts = value.split("-")
    try:
        year = int(parts[0])
        month = int(parts[1]) if len(parts) > 1 else 1
        day = int(parts[2]) if len(parts) > 2 else 1
        return date(year, month, day)
    except ValueError:
        return None
