"""VN search endpoint."""

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from app import schemas
from app.config import get_settings
from app.core.rate_limit import limiter
from app.core.vndb_client import VNDBClient, get_vndb_client
from app.services.search_service import search_vns

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter()


def _parse_limit(value: str | None) -> int | None:
    """Parse the limit parameter leniently; anything non-numeric means default."""
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


@router.get("", response_model=schemas.SearchResponse)
@limiter.limit(settings.search_rate_limit)
async def search(
    request: Request,
    q: str | None = Query(default=None, description="Title search, at least 2 characters"),
    limit: str | None = Query(default=None, description="Number of results (default 9, max 20)"),
    client: VNDBClient = Depends(get_vndb_client),
):
    """
    Search visual novels by title.

    Runs a ranked search on VNDB, then enriches every hit with tags,
    external links and releases. Enrichment failures leave those lists empty.
    """
    try:
        results = await search_vns(client, q, _parse_limit(limit))
    except httpx.HTTPStatusError as e:
        raise HTTPException(status_code=e.response.status_code, detail="Upstream error")
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"VNDB search failed for '{q}': {e}")
        raise HTTPException(status_code=502, detail="Upstream error")

    return schemas.SearchResponse(results=results)
