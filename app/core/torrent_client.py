"""Async client for the torrents-csv search service."""

import logging

import httpx

from app.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class TorrentIndexClient:
    """Thin wrapper around the torrent index GET search endpoint.

    The index answers ``GET ?q=<text>&size=<n>`` with
    ``{"torrents": [{"name", "infohash", "size_bytes", "seeders", "leechers"}]}``.
    """

    def __init__(self, client: httpx.AsyncClient | None = None):
        self.search_url = settings.torrent_index_url
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers={"Accept": "application/json"},
                timeout=float(settings.http_request_timeout),
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def search(self, query: str, size: int) -> list[dict]:
        """Return the raw torrent entries for a free-text query."""
        client = await self._get_client()
        response = await client.get(
            self.search_url,
            params={"q": query, "size": size},
            headers={"Accept": "application/json"},
        )
        response.raise_for_status()
        data = response.json()
        torrents = data.get("torrents") if isinstance(data, dict) else None
        if not isinstance(torrents, list):
            logger.debug(f"Torrent index returned no torrent list for '{query}'")
            return []
        return torrents


_client: TorrentIndexClient | None = None


def get_torrent_client() -> TorrentIndexClient:
    """Get the singleton torrent index client."""
    global _client
    if _client is None:
        _client = TorrentIndexClient()
    return _client
