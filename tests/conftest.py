"""Pytest configuration and fixtures.

Upstream APIs are never contacted: the VNDB and torrent index clients are real
clients whose httpx transport is an ``Upstream`` script, injected into the app
through FastAPI dependency overrides.
"""

import json
import os

# Must be set before app modules read their settings
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from app.core.torrent_client import TorrentIndexClient, get_torrent_client
from app.core.vndb_client import VNDBClient, get_vndb_client
from app.main import app

VNDB_BASE = "https://api.vndb.org/kana"
TORRENT_URL = "https://torrents-csv.com/service/search"


class Upstream:
    """Scripted upstream service that records every request it receives.

    Handlers are registered per URL path and may be an ``httpx.Response``,
    a callable taking the request, or a list of either consumed in order.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict[str, object] = {}

    def on(self, path: str, handler) -> None:
        self.routes[path] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(request.url.path)
        if isinstance(handler, list):
            handler = handler.pop(0)
        if handler is None:
            return httpx.Response(404, json={"error": "unexpected request"})
        if callable(handler):
            return handler(request)
        return handler

    def bodies(self, path: str) -> list[dict]:
        return [json.loads(r.content) for r in self.requests if r.url.path == path]


@pytest.fixture
def vndb_upstream() -> Upstream:
    return Upstream()


@pytest.fixture
def torrent_upstream() -> Upstream:
    return Upstream()


@pytest.fixture
async def vndb_client(vndb_upstream: Upstream) -> VNDBClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(vndb_upstream), base_url=VNDB_BASE)
    client = VNDBClient(client=http)
    yield client
    await client.close()


@pytest.fixture
async def torrent_client(torrent_upstream: Upstream) -> TorrentIndexClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(torrent_upstream))
    client = TorrentIndexClient(client=http)
    yield client
    await client.close()


@pytest.fixture
async def client(vndb_client: VNDBClient, torrent_client: TorrentIndexClient) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI) with scripted upstreams."""
    app.dependency_overrides[get_vndb_client] = lambda: vndb_client
    app.dependency_overrides[get_torrent_client] = lambda: torrent_client
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
