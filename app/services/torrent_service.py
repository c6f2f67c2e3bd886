"""Best-effort torrent lookup by VN title."""

import logging

import httpx

from app import schemas
from app.config import get_settings
from app.core.torrent_client import TorrentIndexClient
from app.services import normalizer
from app.services.search_service import is_searchable

logger = logging.getLogger(__name__)
settings = get_settings()


async def search_torrents(
    client: TorrentIndexClient,
    query: str | None,
) -> list[schemas.TorrentResult]:
    """Search the torrent index. Never raises; failures yield an empty list."""
    if not is_searchable(query):
        return []

    query = query.strip()
    try:
        entries = await client.search(query, size=settings.torrent_results)
        torrents = [
            normalizer.torrent(raw) for raw in entries if isinstance(raw, dict)
        ]
    except (httpx.HTTPError, ValueError) as e:
        # ValueError also covers bad JSON and pydantic validation errors
        logger.warning(f"Torrent search failed for '{query}': {e}")
        return []

    return [item for item in torrents if item is not None]
