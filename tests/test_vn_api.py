"""Tests for GET /api/vn/{id} and GET /api/vn/{id}/releases."""

import httpx
import pytest
from httpx import AsyncClient

from tests.conftest import Upstream
from tests.payloads import RELEASE_PATH, VN_PATH, release_record, vn_record


@pytest.mark.parametrize("vn_id", ["2002", "v2002"])
async def test_detail_normalizes_id(client: AsyncClient, vndb_upstream: Upstream, vn_id: str) -> None:
    vndb_upstream.on(VN_PATH, httpx.Response(200, json={"results": [vn_record()]}))

    response = await client.get(f"/api/vn/{vn_id}")

    assert response.status_code == 200
    (body,) = vndb_upstream.bodies(VN_PATH)
    assert body["filters"] == ["id", "=", "v2002"]
    assert body["results"] == 1
    assert "va{note,staff{id,name},character{id,name}}" in body["fields"]


async def test_detail_returns_full_record(client: AsyncClient, vndb_upstream: Upstream) -> None:
    vndb_upstream.on(VN_PATH, httpx.Response(200, json={"results": [vn_record(aliases=None)]}))

    data = (await client.get("/api/vn/v2002")).json()

    assert data["id"] == "v2002"
    assert data["alttitle"] == "シュタインズ・ゲート"
    assert data["aliases"] == []
    assert data["relations"][0] == {
        "id": "v17", "title": "Ever17", "relation": "ser", "relation_official": True,
    }
    assert data["va"][0]["character"]["name"] == "Okabe Rintarou"
    assert data["screenshots"][0]["thumbnail"] == "https://t.vndb.org/st/00/1.jpg"


async def test_detail_empty_result_is_404(client: AsyncClient, vndb_upstream: Upstream) -> None:
    vndb_upstream.on(VN_PATH, httpx.Response(200, json={"results": []}))

    response = await client.get("/api/vn/999999")

    assert response.status_code == 404


async def test_detail_upstream_error_is_404(client: AsyncClient, vndb_upstream: Upstream) -> None:
    vndb_upstream.on(VN_PATH, httpx.Response(400, text="Invalid filter"))

    response = await client.get("/api/vn/abc")

    assert response.status_code == 404


async def test_detail_network_error_is_500(client: AsyncClient, vndb_upstream: Upstream) -> None:
    def unreachable(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    vndb_upstream.on(VN_PATH, unreachable)

    response = await client.get("/api/vn/v2002")

    assert response.status_code == 500


@pytest.mark.parametrize("vn_id", ["2002", "v2002"])
async def test_releases_query(client: AsyncClient, vndb_upstream: Upstream, vn_id: str) -> None:
    vndb_upstream.on(RELEASE_PATH, httpx.Response(200, json={"results": [release_record()]}))

    response = await client.get(f"/api/vn/{vn_id}/releases")

    assert response.status_code == 200
    (body,) = vndb_upstream.bodies(RELEASE_PATH)
    assert body["filters"] == ["vn", "=", ["id", "=", "v2002"]]
    assert body["results"] == 50

    (release,) = response.json()["releases"]
    assert release["languages"] == ["en", "ja"]
    assert release["official"] is True
    assert release["extlinks"] == [{"url": "https://store.steampowered.com/app/412830", "label": "Steam"}]


async def test_releases_failure_is_empty(client: AsyncClient, vndb_upstream: Upstream) -> None:
    vndb_upstream.on(RELEASE_PATH, httpx.Response(503, text="maintenance"))

    response = await client.get("/api/vn/v2002/releases")

    assert response.status_code == 200
    assert response.json() == {"releases": []}


async def test_detail_non_object_body_is_500(client: AsyncClient, vndb_upstream: Upstream) -> None:
    vndb_upstream.on(VN_PATH, httpx.Response(200, json=[1, 2]))

    response = await client.get("/api/vn/v2002")

    assert response.status_code == 500


async def test_releases_non_object_body_is_empty(client: AsyncClient, vndb_upstream: Upstream) -> None:
    vndb_upstream.on(RELEASE_PATH, httpx.Response(200, json=[1, 2]))

    response = await client.get("/api/vn/v2002/releases")

    assert response.status_code == 200
    assert response.json() == {"releases": []}
