"""Upload checks for clothing photos.

Files are held in memory (they go straight to the image host) and are
accepted only when both the MIME type and the filename extension name an
image format we serve: jpeg, jpg, png or gif.
"""

import re
from dataclasses import dataclass

import structlog
from starlette.datastructures import UploadFile

from wardrobe.core.exceptions import ValidationError

logger = structlog.get_logger()

ALLOWED_IMAGE_TYPES = re.compile(r"jpeg|jpg|png|gif")
IMAGES_ONLY = "Images only"
IMAGE_TOO_LARGE = "Image exceeds maximum size"


@dataclass(frozen=True)
class ImageFile:
    filename: str
    content_type: str
    data: bytes


def is_allowed_image(filename: str | None, content_type: str | None) -> bool:
    """Both the MIME type and the (case-insensitive) filename must match."""
    if not filename or not content_type:
        return False
    return bool(
        ALLOWED_IMAGE_TYPES.search(content_type)
        and ALLOWED_IMAGE_TYPES.search(filename.lower())
    )


async def read_image_upload(upload: UploadFile, max_size: int) -> ImageFile:
    """Validate and read an uploaded image into memory.

    Raises ValidationError (400) for non-images or oversized files.
    """
    logger.debug(
        "uploads.checking", filename=upload.filename, content_type=upload.content_type
    )
    if not is_allowed_image(upload.filename, upload.content_type):
        logger.info("uploads.rejected", reason="type", filename=upload.filename)
        raise ValidationError(IMAGES_ONLY)

    data = await upload.read(max_size + 1)
    if len(data) > max_size:
        logger.info("uploads.rejected", reason="size", filename=upload.filename)
        raise ValidationError(IMAGE_TOO_LARGE)

    return ImageFile(
        filename=upload.filename or "",
        content_type=upload.content_type or "",
        data=data,
    )
