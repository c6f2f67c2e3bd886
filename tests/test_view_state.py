"""Tests for the search page state machine and detail view loading."""

import asyncio

import httpx

from app import schemas
from app.web.view_state import (
    ERROR_MESSAGE,
    NO_RESULTS_MESSAGE,
    LoadStatus,
    SearchSession,
    SearchStatus,
    load_detail_view,
)
from tests.conftest import Upstream
from tests.payloads import RELEASE_PATH, TORRENT_PATH, VN_PATH, release_record, torrent_entry, vn_record


def _item(vn_id: str) -> schemas.SearchResultItem:
    return schemas.SearchResultItem(id=vn_id, title=vn_id)


class ScriptedFetch:
    """Search fetcher whose calls block until released by the test."""

    def __init__(self):
        self.calls: list[str] = []
        self.gates: dict[str, asyncio.Future] = {}

    async def __call__(self, query: str):
        self.calls.append(query)
        future = asyncio.get_running_loop().create_future()
        self.gates[query] = future
        return await future


async def test_short_query_stays_idle():
    fetch = ScriptedFetch()
    session = SearchSession(fetch)
    session.query = " a "

    assert session.submit() is None
    assert session.status is SearchStatus.IDLE
    assert fetch.calls == []
    assert session.hint == "Type at least 2 characters, then press Enter"


async def test_submit_loading_then_ready():
    fetch = ScriptedFetch()
    session = SearchSession(fetch)
    session.query = "  ever17 "

    task = session.submit()
    assert session.status is SearchStatus.LOADING
    assert session.address == "/?q=ever17"
    await asyncio.sleep(0)

    fetch.gates["ever17"].set_result([_item("v17")])
    await task

    assert session.status is SearchStatus.READY
    assert session.message is None
    assert [r.id for r in session.results] == ["v17"]


async def test_empty_results_message():
    async def fetch(query):
        return []

    session = SearchSession(fetch)
    session.query = "zzzz"
    await session.submit()

    assert session.status is SearchStatus.READY
    assert session.message == NO_RESULTS_MESSAGE


async def test_failed_fetch_is_error():
    async def fetch(query):
        raise httpx.ConnectError("down")

    session = SearchSession(fetch)
    session.query = "ever17"
    await session.submit()

    assert session.status is SearchStatus.ERROR
    assert session.message == ERROR_MESSAGE


async def test_new_search_cancels_in_flight_one_silently():
    fetch = ScriptedFetch()
    session = SearchSession(fetch)

    session.query = "first"
    first = session.submit()
    await asyncio.sleep(0)

    session.query = "second"
    second = session.submit()
    await asyncio.sleep(0)

    assert first.cancelled() or first.done()
    fetch.gates["second"].set_result([_item("v2")])
    await second

    assert session.status is SearchStatus.READY
    assert [r.id for r in session.results] == ["v2"]
    assert fetch.calls == ["first", "second"]


async def test_close_cancels_without_error():
    fetch = ScriptedFetch()
    session = SearchSession(fetch)
    session.query = "pending"
    session.submit()
    await asyncio.sleep(0)

    await session.close()

    assert session.status is SearchStatus.LOADING
    assert session.message is None


async def test_address_restores_query_and_fetches_once():
    fetch = ScriptedFetch()
    session = SearchSession(fetch)

    task = session.sync_from_address("Ever17")
    assert session.query == "Ever17"
    await asyncio.sleep(0)
    fetch.gates["Ever17"].set_result([_item("v17")])
    await task

    # Results already present: a repeated address sync does not refetch
    assert session.sync_from_address("Ever17") is None
    assert fetch.calls == ["Ever17"]


async def test_address_without_query_clears_results():
    async def fetch(query):
        return [_item("v17")]

    session = SearchSession(fetch)
    await session.sync_from_address("Ever17")
    assert session.status is SearchStatus.READY

    session.sync_from_address(None)

    assert session.status is SearchStatus.IDLE
    assert session.query == ""
    assert session.results == []


async def test_address_restore_skipped_after_error():
    calls = []

    async def fetch(query):
        calls.append(query)
        raise httpx.ConnectError("down")

    session = SearchSession(fetch)
    await session.sync_from_address("Ever17")
    assert session.status is SearchStatus.ERROR

    assert session.sync_from_address("Ever17") is None
    assert calls == ["Ever17"]


async def test_detail_view_loads_panels_independently(vndb_client, torrent_client, vndb_upstream: Upstream, torrent_upstream: Upstream):
    vndb_upstream.on(VN_PATH, httpx.Response(200, json={"results": [vn_record()]}))
    vndb_upstream.on(RELEASE_PATH, httpx.Response(502))
    torrent_upstream.on(TORRENT_PATH, httpx.Response(200, json={"torrents": [torrent_entry("Steins;Gate")]}))

    view = await load_detail_view(vndb_client, torrent_client, "2002", query="gate")

    assert view.status is LoadStatus.READY
    assert view.releases_status is LoadStatus.READY
    assert view.releases == []
    assert [t.name for t in view.torrents] == ["Steins;Gate"]
    assert torrent_upstream.requests[0].url.params["q"] == "Steins;Gate"
    assert [t.name for t in view.display_tags] == ["Time Travel", "Otaku Protagonist"]
    assert view.back_url == "/?q=gate"


async def test_detail_view_not_found(vndb_client, torrent_client, vndb_upstream: Upstream, torrent_upstream: Upstream):
    vndb_upstream.on(VN_PATH, httpx.Response(200, json={"results": []}))
    vndb_upstream.on(RELEASE_PATH, httpx.Response(200, json={"results": [release_record()]}))

    view = await load_detail_view(vndb_client, torrent_client, "v1")

    assert view.status is LoadStatus.NOT_FOUND
    assert len(view.releases) == 1
    assert torrent_upstream.requests == []
    assert view.back_url == "/"
