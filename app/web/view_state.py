"""View state for the search and detail pages.

State is modelled as explicit status enums. ``SearchSession`` owns the search
lifecycle (idle -> loading -> ready | error), including cancellation of a
superseded search. ``load_detail_view`` fetches the detail record and the
release list concurrently, each with its own status, and chains the torrent
lookup on the detail title.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable

import httpx

from app import schemas
from app.config import get_settings
from app.core.torrent_client import TorrentIndexClient
from app.core.vndb_client import VNDBClient
from app.services.torrent_service import search_torrents
from app.services.vn_service import VNNotFoundError, get_vn_detail, get_vn_releases
from app.web.formatting import query_suffix, select_display_tags

logger = logging.getLogger(__name__)
settings = get_settings()

NO_RESULTS_MESSAGE = "No visual novels found."
ERROR_MESSAGE = "Something went wrong. Try again."

SearchFetcher = Callable[[str], Awaitable[list[schemas.SearchResultItem]]]


class SearchStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class LoadStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    NOT_FOUND = "not_found"
    ERROR = "error"


class SearchSession:
    """
    Search page state machine.

    - submit(): Enter pressed. Requires a trimmed query of at least
      ``search_min_query`` characters; cancels any in-flight search, mirrors
      the query into the address and starts a new fetch.
    - sync_from_address(): the address changed (reload, back/forward). A
      usable ``q`` is restored into the input and fetched if nothing has been
      fetched yet; an address without ``q`` clears shown results.
    - A superseded (cancelled) fetch never moves the session to ERROR.
    """

    def __init__(self, fetch: SearchFetcher):
        self.fetch = fetch
        self.query = ""
        self.address_query: str | None = None
        self.results: list[schemas.SearchResultItem] = []
        self.status = SearchStatus.IDLE
        self.message: str | None = None
        self._task: asyncio.Task | None = None

    @property
    def can_search(self) -> bool:
        return len(self.query.strip()) >= settings.search_min_query

    @property
    def address(self) -> str:
        """Navigable address mirroring the submitted query."""
        return "/" + query_suffix(self.address_query)

    @property
    def hint(self) -> str:
        if self.status is SearchStatus.LOADING:
            return "Searching…"
        if self.can_search:
            return "Press Enter to search"
        return f"Type at least {settings.search_min_query} characters, then press Enter"

    def submit(self) -> asyncio.Task | None:
        if not self.can_search:
            return None
        trimmed = self.query.strip()
        self.address_query = trimmed
        return self._start(trimmed)

    def sync_from_address(self, address_query: str | None) -> asyncio.Task | None:
        self.address_query = address_query
        trimmed = (address_query or "").strip()

        if len(trimmed) >= settings.search_min_query:
            if self.query.strip() != trimmed:
                self.query = trimmed
            # Restore only into a fresh session; an errored session is left alone
            if not self.results and self.status is SearchStatus.IDLE:
                return self._start(trimmed)
            return None

        if not address_query and self.results:
            self.query = ""
            self.results = []
            self.status = SearchStatus.IDLE
            self.message = None
        return None

    def cancel(self) -> None:
        """Cancel the in-flight search, if any."""
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def close(self) -> None:
        """Cancel and wait for the in-flight search (page teardown)."""
        task = self._task
        self.cancel()
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    def _start(self, query: str) -> asyncio.Task:
        self.cancel()
        self.status = SearchStatus.LOADING
        self.message = None
        self._task = asyncio.create_task(self._run(query))
        return self._task

    async def _run(self, query: str) -> None:
        try:
            results = await self.fetch(query)
        except asyncio.CancelledError:
            logger.debug(f"Search '{query}' superseded")
            raise
        except Exception as e:
            logger.warning(f"Search '{query}' failed: {e}")
            if self._task is asyncio.current_task():
                self.status = SearchStatus.ERROR
                self.message = ERROR_MESSAGE
            return

        if self._task is not asyncio.current_task():
            return
        self.results = results
        self.status = SearchStatus.READY
        self.message = None if results else NO_RESULTS_MESSAGE


@dataclass
class DetailView:
    """Everything the detail page renders, with per-panel status."""
    vn_id: str
    query: str | None = None
    vn: schemas.VNDetailResponse | None = None
    status: LoadStatus = LoadStatus.LOADING
    releases: list[schemas.Release] = field(default_factory=list)
    releases_status: LoadStatus = LoadStatus.LOADING
    torrents: list[schemas.TorrentResult] = field(default_factory=list)

    @property
    def query_param(self) -> str:
        return query_suffix(self.query)

    @property
    def back_url(self) -> str:
        return "/" + self.query_param

    @property
    def display_tags(self) -> list[schemas.VNTag]:
        return select_display_tags(self.vn.tags) if self.vn else []


async def load_detail_view(
    vndb: VNDBClient,
    torrent_client: TorrentIndexClient,
    vn_id: str,
    query: str | None = None,
) -> DetailView:
    view = DetailView(vn_id=vn_id, query=query)

    async def load_detail():
        try:
            view.vn = await get_vn_detail(vndb, vn_id)
        except VNNotFoundError:
            view.status = LoadStatus.NOT_FOUND
            return
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to load VN {vn_id}: {e}")
            view.status = LoadStatus.ERROR
            return
        view.status = LoadStatus.READY

        if view.vn.title:
            view.torrents = await search_torrents(torrent_client, view.vn.title)

    async def load_releases():
        view.releases = await get_vn_releases(vndb, vn_id)
        view.releases_status = LoadStatus.READY

    await asyncio.gather(load_detail(), load_releases())
    return view
