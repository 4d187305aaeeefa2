"""Image hosting — upload and destroy clothing photos.

Learn: The rest of the app only sees ``ImageStorage``: upload bytes, get
back a URL plus an opaque asset id; destroy by asset id. Cloudinary is
the production implementation. Tests swap in a recording fake through
the ``get_image_storage`` dependency.

The Cloudinary SDK is synchronous (blocking HTTP), so calls run in a
worker thread to keep the event loop free for other requests.
"""

import asyncio
from dataclasses import dataclass
from typing import Protocol

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader
import structlog

from wardrobe.config import Settings, settings
from wardrobe.core.exceptions import ImageServiceError

logger = structlog.get_logger()


@dataclass(frozen=True)
class UploadedImage:
    url: str
    asset_id: str


class ImageStorage(Protocol):
    async def upload(self, data: bytes, filename: str | None = None) -> UploadedImage: ...

    async def destroy(self, asset_id: str) -> None: ...


def initialize_cloudinary(config: Settings) -> bool:
    """Configure the Cloudinary SDK from settings. False if not configured."""
    if not config.cloudinary_configured:
        return False
    cloudinary.config(
        cloud_name=config.cloudinary_cloud_name,
        api_key=config.cloudinary_api_key,
        api_secret=config.cloudinary_api_secret,
        secure=True,
    )
    return True


class CloudinaryImageStorage:
    """Cloudinary-backed storage.

    Uploads ask Cloudinary to strip the background and flatten onto white,
    so every wardrobe photo renders the same way in the catalog.
    """

    def __init__(self, config: Settings):
        self.config = config

    def _upload_options(self) -> dict:
        return {
            "folder": self.config.cloudinary_folder,
            "resource_type": "image",
            "background_removal": "cloudinary_ai",
            "transformation": [{"background": "#FFFFFF"}],
        }

    def _ensure_configured(self) -> None:
        if not initialize_cloudinary(self.config):
            raise ImageServiceError()

    async def upload(self, data: bytes, filename: str | None = None) -> UploadedImage:
        self._ensure_configured()
        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.upload, data, **self._upload_options()
            )
        except cloudinary.exceptions.Error as e:
            logger.error("images.upload_failed", error=str(e), filename=filename)
            raise ImageServiceError() from e

        url, asset_id = result.get("secure_url"), result.get("public_id")
        if not url or not asset_id:
            logger.error("images.upload_incomplete", filename=filename)
            raise ImageServiceError()
        logger.info("images.uploaded", asset_id=asset_id)
        return UploadedImage(url=url, asset_id=asset_id)

    async def destroy(self, asset_id: str) -> None:
        self._ensure_configured()
        try:
            result = await asyncio.to_thread(cloudinary.uploader.destroy, asset_id)
        except cloudinary.exceptions.Error as e:
            logger.error("images.destroy_failed", asset_id=asset_id, error=str(e))
            raise ImageServiceError() from e
        # "not found" means it is already gone, which is what we wanted
        logger.info("images.destroyed", asset_id=asset_id, result=result.get("result"))


def get_image_storage() -> ImageStorage:
    """FastAPI dependency — the configured image host."""
    return CloudinaryImageStorage(settings)
