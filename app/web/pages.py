"""Server-rendered browser pages: search (/) and VN detail (/vn/{vn_id})."""

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, Query, Request
from fastapi.templating import Jinja2Templates

from app.config import get_settings
from app.core.torrent_client import TorrentIndexClient, get_torrent_client
from app.core.vndb_client import VNDBClient, get_vndb_client
from app.services.search_service import search_vns
from app.web import formatting
from app.web.view_state import LoadStatus, SearchSession, SearchStatus, load_detail_view

logger = logging.getLogger(__name__)
settings = get_settings()

WEB_DIR = Path(__file__).parent
STATIC_DIR = WEB_DIR / "static"

templates = Jinja2Templates(directory=str(WEB_DIR / "templates"))
templates.env.filters["snippet"] = formatting.format_snippet
templates.env.filters["description"] = formatting.sanitize_description
templates.env.filters["rating"] = formatting.format_rating
templates.env.filters["hours"] = formatting.format_hours
templates.env.tests["allowed_image"] = formatting.is_allowed_image
templates.env.globals["app_name"] = settings.app_name
templates.env.globals["query_suffix"] = formatting.query_suffix

router = APIRouter()


@router.get("/", include_in_schema=False)
async def search_page(
    request: Request,
    q: str | None = Query(default=None),
    vndb: VNDBClient = Depends(get_vndb_client),
):
    """Search page. The ``q`` parameter is the source of truth for the query."""
    session = SearchSession(
        fetch=lambda query: search_vns(vndb, query, settings.search_default_limit),
    )
    task = session.sync_from_address(q)
    if task is not None:
        try:
            await task
        finally:
            await session.close()

    return templates.TemplateResponse(
        request,
        "search.html",
        {
            "session": session,
            "input_value": session.query or (q or ""),
            "placeholder": formatting.random_placeholder(),
            "SearchStatus": SearchStatus,
        },
        status_code=502 if session.status is SearchStatus.ERROR else 200,
    )


@router.get("/vn/{vn_id}", include_in_schema=False)
async def vn_page(
    request: Request,
    vn_id: str,
    q: str | None = Query(default=None),
    vndb: VNDBClient = Depends(get_vndb_client),
    torrent_client: TorrentIndexClient = Depends(get_torrent_client),
):
    """VN detail page with releases, relations and torrents."""
    view = await load_detail_view(vndb, torrent_client, vn_id, q)

    if view.status is LoadStatus.NOT_FOUND:
        return templates.TemplateResponse(
            request, "vn_not_found.html", {"view": view}, status_code=404,
        )
    if view.status is LoadStatus.ERROR:
        return templates.TemplateResponse(
            request, "vn_error.html", {"view": view}, status_code=502,
        )

    return templates.TemplateResponse(request, "vn_detail.html", {"view": view})
