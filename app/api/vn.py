"""Visual Novel detail endpoints."""

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException

from app import schemas
from app.core.vndb_client import VNDBClient, get_vndb_client
from app.services.vn_service import VNNotFoundError, get_vn_detail, get_vn_releases

logger = logging.getLogger(__name__)

router = APIRouter()


# NOTE: /{vn_id}/releases must be declared before /{vn_id}


@router.get("/{vn_id}/releases", response_model=schemas.ReleasesResponse)
async def get_releases(
    vn_id: str,
    client: VNDBClient = Depends(get_vndb_client),
):
    """Get up to 50 releases of a VN. Upstream failures return an empty list."""
    releases = await get_vn_releases(client, vn_id)
    return schemas.ReleasesResponse(releases=releases)


@router.get("/{vn_id}", response_model=schemas.VNDetailResponse)
async def get_vn(
    vn_id: str,
    client: VNDBClient = Depends(get_vndb_client),
):
    """
    Get detailed information about a visual novel.

    Accepts ids with or without the "v" prefix. Includes description, images,
    screenshots, tags, external links, relations, developers, staff and
    voice actors.
    """
    try:
        return await get_vn_detail(client, vn_id)
    except VNNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Failed to fetch VN {vn_id} from VNDB: {e}")
        raise HTTPException(status_code=500, detail="Internal error")
