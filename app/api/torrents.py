"""Torrent lookup endpoint."""

from fastapi import APIRouter, Depends, Query, Request

from app import schemas
from app.config import get_settings
from app.core.rate_limit import limiter
from app.core.torrent_client import TorrentIndexClient, get_torrent_client
from app.services.torrent_service import search_torrents

settings = get_settings()

router = APIRouter()


@router.get("", response_model=schemas.TorrentSearchResponse)
@limiter.limit(settings.search_rate_limit)
async def torrents(
    request: Request,
    q: str | None = Query(default=None, description="Free-text name, at least 2 characters"),
    client: TorrentIndexClient = Depends(get_torrent_client),
):
    """Find torrents by name. Always answers 200; failures give no results."""
    results = await search_torrents(client, q)
    return schemas.TorrentSearchResponse(results=results)
