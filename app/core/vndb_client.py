"""
Async client for the VNDB Kana API.

Kana queries are POSTed as JSON:

    {"filters": [...], "fields": "a,b.c", "sort": "...", "results": N}

Filters are either a three-element predicate ``[field, operator, value]`` or a
boolean combination ``["or", predicate, predicate, ...]``. The response body is
``{"results": [...], "more": bool}``.

Errors are not swallowed here: non-2xx responses raise httpx.HTTPStatusError
and transport problems raise httpx.HTTPError subclasses. Callers decide
whether a failure is fatal or degrades to an empty result.
"""

import logging

import httpx

from app.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


def id_filter(vn_ids: list[str]) -> list:
    """Build an id filter: a single equality, or an "or" over all ids."""
    if len(vn_ids) == 1:
        return ["id", "=", vn_ids[0]]
    return ["or"] + [["id", "=", vid] for vid in vn_ids]


class VNDBClient:
    """Async client for VNDB Kana API."""

    def __init__(self, client: httpx.AsyncClient | None = None):
        self.base_url = settings.vndb_api_url
        self.token = settings.vndb_api_token
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {"Content-Type": "application/json"}
            if self.token:
                headers["Authorization"] = f"Token {self.token}"

            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=float(settings.http_request_timeout),
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def _post(self, endpoint: str, payload: dict) -> dict:
        """POST a query to VNDB and return the decoded JSON body."""
        client = await self._get_client()
        try:
            response = await client.post(endpoint, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"VNDB API error: {e.response.status_code} - {e.response.text[:200]}"
            )
            raise

        data = response.json()
        if not isinstance(data, dict) or not isinstance(data.get("results", []), list):
            raise ValueError(f"Unexpected VNDB response body from {endpoint}")
        return data

    async def query_vn(
        self,
        filters: list,
        fields: str,
        results: int,
        sort: str | None = None,
    ) -> dict:
        """Query visual novels."""
        payload = {
            "filters": filters,
            "fields": fields,
            "results": results,
        }
        if sort:
            payload["sort"] = sort

        return await self._post("/vn", payload)

    async def query_release(
        self,
        filters: list,
        fields: str,
        results: int,
    ) -> dict:
        """Query releases."""
        payload = {
            "filters": filters,
            "fields": fields,
            "results": results,
        }
        return await self._post("/release", payload)

    async def get_vn_by_ids(self, vn_ids: list[str], fields: str) -> list[dict]:
        """Get VN records for the given ids in a single batched query."""
        if not vn_ids:
            return []

        result = await self.query_vn(
            filters=id_filter(vn_ids),
            fields=fields,
            results=len(vn_ids),
        )
        return result.get("results") or []


# Singleton client instance
_client: VNDBClient | None = None


def get_vndb_client() -> VNDBClient:
    """Get the singleton VNDB client."""
    global _client
    if _client is None:
        _client = VNDBClient()
    return _client
