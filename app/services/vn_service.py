"""Single-VN lookups: full detail record and its releases."""

import logging

import httpx

from app import schemas
from app.config import get_settings
from app.core.vndb_client import VNDBClient
from app.services import normalizer

logger = logging.getLogger(__name__)
settings = get_settings()

DETAIL_FIELDS = (
    "id,title,aliases,alttitle,olang,description,released,length,length_minutes,"
    "average,rating,votecount,languages,platforms,devstatus,"
    "image.url,image.thumbnail,screenshots.url,screenshots.thumbnail,"
    "tags{name,description,category,spoiler,rating},extlinks{url,label},"
    "relations{id,title,relation,relation_official},developers{name,id},"
    "staff{id,role,note},va{note,staff{id,name},character{id,name}}"
)

RELEASE_FIELDS = "id,title,languages,platforms,official,freeware,patch,released,extlinks{url,label}"


class VNNotFoundError(Exception):
    """VNDB answered, but has no such VN (or refused the lookup)."""

    def __init__(self, vn_id: str):
        super().__init__(f"VN {vn_id} not found")
        self.vn_id = vn_id


async def get_vn_detail(client: VNDBClient, vn_id: str) -> schemas.VNDetailResponse:
    """
    Fetch the full record for one VN.

    Raises:
        VNNotFoundError: VNDB returned a non-success status or no result.
        httpx.HTTPError / ValueError: VNDB could not be reached or parsed.
    """
    normalized_id = normalizer.normalize_vn_id(vn_id)

    try:
        data = await client.query_vn(
            filters=["id", "=", normalized_id],
            fields=DETAIL_FIELDS,
            results=1,
        )
    except httpx.HTTPStatusError:
        raise VNNotFoundError(normalized_id)

    results = data.get("results") or []
    if not results:
        raise VNNotFoundError(normalized_id)

    return normalizer.vn_detail(results[0])


async def get_vn_releases(client: VNDBClient, vn_id: str) -> list[schemas.Release]:
    """Fetch releases of a VN. Any upstream failure yields an empty list."""
    normalized_id = normalizer.normalize_vn_id(vn_id)

    try:
        data = await client.query_release(
            filters=["vn", "=", ["id", "=", normalized_id]],
            fields=RELEASE_FIELDS,
            results=settings.release_results,
        )
        return [
            normalizer.release(raw) for raw in data.get("results") or []
            if isinstance(raw, dict)
        ]
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Failed to fetch releases for {normalized_id}: {e}")
        return []
