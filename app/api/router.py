"""API router - aggregates all endpoint routers."""

from fastapi import APIRouter

from app.api import search, torrents, vn

api_router = APIRouter()

api_router.include_router(search.router, prefix="/search", tags=["search"])
api_router.include_router(vn.router, prefix="/vn", tags=["visual-novels"])
api_router.include_router(torrents.router, prefix="/torrents", tags=["torrents"])
