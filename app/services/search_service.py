"""Two-phase VN search against VNDB.

Phase 1 runs a ranked title search with a small field set. Phase 2 fetches
tags, external links and releases for every phase-1 hit in one batched id
query and merges them back by id. Only phase 1 failures reach the caller;
phase 2 is enrichment and degrades to empty lists.
"""

import logging

import httpx

from app import schemas
from app.config import get_settings
from app.core.vndb_client import VNDBClient
from app.services import normalizer

logger = logging.getLogger(__name__)
settings = get_settings()

BASE_FIELDS = (
    "id,title,aliases,description,released,image.url,image.thumbnail,"
    "length_minutes,average,votecount,platforms,languages"
)

DETAIL_FIELDS = (
    "tags.name,tags.spoiler,tags.rating,extlinks.url,extlinks.label,"
    "releases.id,releases.title,releases.languages,"
    "releases.extlinks.url,releases.extlinks.label"
)


def clamp_limit(limit: int | None) -> int:
    """Apply the default and the upper cap to a requested result count."""
    if limit is None:
        return settings.search_default_limit
    return max(1, min(limit, settings.search_max_limit))


def is_searchable(query: str | None) -> bool:
    """True when the trimmed query is long enough to send upstream."""
    return bool(query) and len(query.strip()) >= settings.search_min_query


async def _fetch_details(client: VNDBClient, vn_ids: list[str]) -> dict[str, dict]:
    """Fetch enrichment fields keyed by VN id. Never raises."""
    try:
        entries = await client.get_vn_by_ids(vn_ids, fields=DETAIL_FIELDS)
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Search detail fetch failed for {len(vn_ids)} VNs: {e}")
        return {}
    return {
        entry["id"]: entry for entry in entries
        if isinstance(entry, dict) and entry.get("id")
    }


async def search_vns(
    client: VNDBClient,
    query: str | None,
    limit: int | None = None,
) -> list[schemas.SearchResultItem]:
    """
    Search visual novels by title.

    Returns an empty list without contacting VNDB when the query is too short.

    Raises:
        httpx.HTTPStatusError: VNDB rejected the ranked search.
        httpx.HTTPError: VNDB could not be reached.
    """
    if not is_searchable(query):
        return []

    query = query.strip()
    data = await client.query_vn(
        filters=["search", "=", query],
        fields=BASE_FIELDS,
        sort="searchrank",
        results=clamp_limit(limit),
    )
    base_results = [
        item for item in data.get("results") or []
        if isinstance(item, dict) and item.get("id")
    ]

    details: dict[str, dict] = {}
    if base_results:
        details = await _fetch_details(client, [item["id"] for item in base_results])

    logger.info(
        f"Search '{query}': {len(base_results)} results, {len(details)} enriched"
    )
    results = []
    for item in base_results:
        try:
            results.append(normalizer.search_item(item, details.get(item["id"])))
        except ValueError as e:
            # Malformed enrichment must not drop the hit itself
            logger.warning(f"Ignoring detail for {item['id']}: {e}")
            results.append(normalizer.search_item(item))
    return results
