"""REST endpoints for searching, uploading and deleting media."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, File, Query, UploadFile

from media_gateway.config import get_settings
from media_gateway.models import GetImagesResponse, Resource
from media_gateway.services.media import MediaService, get_media_service

router = APIRouter(prefix="/media", tags=["media"])
settings = get_settings()
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


# ---------------------------------------------------------------------------
# Search / listing
# ---------------------------------------------------------------------------


@router.get("", response_model=GetImagesResponse)
async def get_all_images(
    folder_names: str | None = Query(None, alias="folderNames"),
    resource_types: str | None = Query(None, alias="resourceTypes"),
    limit: int = Query(25, ge=1, le=settings.media_max_results),
    cursor: str = Query(""),
    service: MediaService = Depends(get_media_service),
):
    return await service.get_all_images(limit, split_csv(folder_names), split_csv(resource_types), cursor)


@router.get("/folders")
async def get_all_folders(service: MediaService = Depends(get_media_service)) -> list[dict[str, Any]]:
    return await service.get_all_folders()


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------


@router.post("/image", response_model=Resource)
async def upload_image(
    file: UploadFile = File(...),
    service: MediaService = Depends(get_media_service),
):
    data = await file.read()
    logger.debug("Received image upload %s (%d bytes)", file.filename, len(data))
    return await service.upload_image(data, file.filename)


@router.post("/video", response_model=Resource)
async def upload_video(
    video: UploadFile = File(...),
    service: MediaService = Depends(get_media_service),
):
    data = await video.read()
    logger.debug("Received video upload %s (%d bytes)", video.filename, len(data))
    return await service.upload_video(data, video.filename)


# ---------------------------------------------------------------------------
# Deletion
# ---------------------------------------------------------------------------


@router.delete("/image")
async def delete_image(
    public_id: str = Query(..., alias="publicId"),
    service: MediaService = Depends(get_media_service),
):
    await service.delete_image(public_id)


@router.delete("/video")
async def delete_video(
    public_id: str = Query(..., alias="publicId"),
    service: MediaService = Depends(get_media_service),
):
    await service.delete_video(public_id)
