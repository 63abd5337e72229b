"""Cloudinary-backed media service.

Searches, lists, uploads and deletes assets stored at Cloudinary and narrows
the provider's responses down to :class:`~media_gateway.models.Resource`.

Credentials are passed explicitly through :class:`CloudinaryConfig` and sent
with each call as per-call options, so the SDK's process-wide configuration is
never touched. The SDK is blocking; every provider call is run in a worker
thread and awaited once.
"""
from __future__ import annotations

import asyncio
import io
import logging
from functools import lru_cache
from typing import Any, Sequence

import cloudinary.api
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from cloudinary.search import Search

from media_gateway.config import CloudinaryConfig, get_settings
from media_gateway.models import GetImagesResponse, Resource

logger = logging.getLogger(__name__)

DEFAULT_TYPE_EXPRESSION = "resource_type:image OR resource_type:video"
IMAGE_FORMATS = ("jpg", "jpeg", "png")
VIDEO_FORMATS = ("mp4", "webm", "avi")

# The SDK raises ValueError before any request when credentials are missing.
PROVIDER_ERRORS = (CloudinaryError, ValueError)


class MediaServiceError(Exception):
    """Raised when the provider fails to serve a request."""

    status_code = 502


class MediaValidationError(MediaServiceError):
    """Raised when the provider rejects the caller's input."""

    status_code = 400


def build_search_expression(
    folder_names: Sequence[str] | None = None,
    resource_types: Sequence[str] | None = None,
) -> str:
    """Build a Cloudinary search expression.

    The type clause defaults to images and videos. A folder clause is added
    only when folder names are given and always comes first::

        (folder:a OR folder:b) AND (resource_type:image)
    """

    if resource_types:
        expression = "resource_type:" + " OR resource_type:".join(resource_types)
    else:
        expression = DEFAULT_TYPE_EXPRESSION

    if folder_names:
        folders = " OR ".join(f"folder:{name}" for name in folder_names)
        expression = f"({folders}) AND ({expression})"

    return expression


class MediaService:
    """Thin async wrapper around the Cloudinary search, admin and upload APIs."""

    def __init__(self, config: CloudinaryConfig, *, upload_folder: str = "test") -> None:
        self._config = config
        self._upload_folder = upload_folder

    # ------------------------------------------------------------------
    # Search / listing
    # ------------------------------------------------------------------

    async def get_all_images(
        self,
        limit: int,
        folder_names: Sequence[str] | None = None,
        resource_types: Sequence[str] | None = None,
        cursor: str | None = None,
    ) -> GetImagesResponse:
        expression = build_search_expression(folder_names, resource_types)
        logger.debug("Searching media: %s (limit=%s, cursor=%s)", expression, limit, cursor)

        search = Search()
        search.expression(expression)
        search.sort_by("created_at", "desc")
        search.max_results(limit)
        if cursor:
            search.next_cursor(cursor)

        try:
            data = await asyncio.to_thread(search.execute, **self._config.as_options())
            resources = [Resource.from_provider(item) for item in data.get("resources", [])]
        except Exception as exc:
            logger.exception("Cloudinary search failed: %s", exc)
            raise MediaServiceError("Failed to retrieve images from Cloudinary") from exc

        return GetImagesResponse(next_cursor=data.get("next_cursor"), resources=resources)

    async def get_all_folders(self) -> list[dict[str, Any]]:
        try:
            result = await asyncio.to_thread(cloudinary.api.root_folders, **self._config.as_options())
            return result["folders"]
        except Exception as exc:
            logger.exception("Cloudinary folder listing failed: %s", exc)
            raise MediaServiceError("Failed to retrieve folders from Cloudinary") from exc

    # ------------------------------------------------------------------
    # Uploads
    # ------------------------------------------------------------------

    async def upload_image(self, data: bytes, filename: str | None = None) -> Resource:
        return await self._upload(data, filename, resource_type="auto", allowed_formats=IMAGE_FORMATS)

    async def upload_video(self, data: bytes, filename: str | None = None) -> Resource:
        return await self._upload(data, filename, resource_type="video", allowed_formats=VIDEO_FORMATS)

    async def _upload(
        self,
        data: bytes,
        filename: str | None,
        *,
        resource_type: str,
        allowed_formats: Sequence[str],
    ) -> Resource:
        """Upload an in-memory payload and return the stored resource.

        Provider rejections are returned in the response body instead of being
        raised by the SDK (``return_error``) so their HTTP code decides whether
        the caller or the provider is at fault.
        """

        options: dict[str, Any] = {
            "folder": self._upload_folder,
            "resource_type": resource_type,
            "overwrite": True,
            "allowed_formats": list(allowed_formats),
            "return_error": True,
            **self._config.as_options(),
        }
        if filename:
            options["filename"] = filename

        with io.BytesIO(data) as buffer:
            try:
                result = await asyncio.to_thread(cloudinary.uploader.upload, buffer, **options)
            except PROVIDER_ERRORS as exc:
                logger.warning("Upload of %s failed: %s", filename or "<stream>", exc)
                raise MediaServiceError(f"Upload failed: {exc}") from exc

        error = result.get("error")
        if error:
            message = error.get("message") or "Upload rejected by Cloudinary"
            http_code = error.get("http_code")
            logger.warning("Upload of %s rejected (%s): %s", filename or "<stream>", http_code, message)
            if http_code == 400:
                raise MediaValidationError(message)
            raise MediaServiceError(message)

        resource = Resource.from_provider(result)
        logger.info("Uploaded %s as %s (%s)", filename or "<stream>", resource.public_id, resource.resource_type)
        return resource

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    async def delete_image(self, public_id: str) -> None:
        try:
            result = await asyncio.to_thread(cloudinary.uploader.destroy, public_id, **self._config.as_options())
        except PROVIDER_ERRORS as exc:
            raise MediaServiceError(f"Failed to delete image: {exc}") from exc
        logger.info("Deleted image %s: %s", public_id, result.get("result"))

    async def delete_video(self, public_id: str) -> None:
        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.destroy,
                public_id,
                resource_type="video",
                **self._config.as_options(),
            )
        except PROVIDER_ERRORS as exc:
            raise MediaServiceError(f"Failed to delete video: {exc}") from exc
        logger.info("Deleted video %s: %s", public_id, result.get("result"))


@lru_cache()
def get_media_service() -> MediaService:
    """Return the process-wide service built from the cached settings."""

    settings = get_settings()
    return MediaService(settings.cloudinary, upload_folder=settings.media_upload_folder)
