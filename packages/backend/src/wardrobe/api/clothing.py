"""Clothing API — the authenticated user's wardrobe.

Learn: Routes for clothing items (all behind the accessToken cookie):
- GET    /clothing          → list own items, filtered by query params
- POST   /clothing          → create an item (JSON or multipart with ``image``)
- PUT    /clothing/{id}     → partial update, owner only
- DELETE /clothing/{id}     → delete item and its hosted image, owner only

The owner always comes from the verified token, never from the request.
"""

import json

import pydantic
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from wardrobe.auth.dependencies import CurrentUser, get_current_user
from wardrobe.config import settings
from wardrobe.core.exceptions import ValidationError
from wardrobe.db.engine import get_db
from wardrobe.images.storage import ImageStorage, get_image_storage
from wardrobe.images.uploads import ImageFile, read_image_upload
from wardrobe.schemas.clothing import ClothingItemInput, ClothingItemRead
from wardrobe.services.clothing_service import ClothingService, parse_item_id
from wardrobe.services.item_filters import query_params_to_mapping

router = APIRouter(prefix="/clothing")

IMAGE_FIELD = "image"


def _clothing(
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    images: ImageStorage = Depends(get_image_storage),
) -> ClothingService:
    return ClothingService(db, images, owner_id=current.id)


async def _parse_item_payload(
    request: Request,
) -> tuple[ClothingItemInput, ImageFile | None]:
    """Read item fields from a JSON or multipart/form body.

    Multipart bodies may carry one image file under ``image``; it is
    checked (type, size) before anything is uploaded.
    """
    content_type = request.headers.get("content-type", "")
    image = None

    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        form = await request.form()
        raw = {k: v for k, v in form.items() if isinstance(v, str)}
        upload = form.get(IMAGE_FIELD)
        if isinstance(upload, UploadFile) and upload.filename:
            image = await read_image_upload(upload, settings.max_image_size)
    else:
        body = await request.body()
        try:
            raw = json.loads(body) if body else {}
        except ValueError:
            raise ValidationError()
        if not isinstance(raw, dict):
            raise ValidationError()

    try:
        fields = ClothingItemInput.model_validate(raw)
    except pydantic.ValidationError:
        raise ValidationError()
    return fields, image


@router.get("", response_model=list[ClothingItemRead])
async def list_clothing(
    request: Request,
    service: ClothingService = Depends(_clothing),
):
    """List the caller's items. Supports ?name, ?brand (substring),
    ?category and ?color (exact)."""
    query = query_params_to_mapping(list(request.query_params.multi_items()))
    return await service.list_items(query)


@router.post("", response_model=ClothingItemRead, status_code=201)
async def create_clothing(
    request: Request,
    service: ClothingService = Depends(_clothing),
):
    fields, image = await _parse_item_payload(request)
    return await service.create_item(fields, image)


@router.put("/{item_id}", response_model=ClothingItemRead)
async def update_clothing(
    item_id: str,
    request: Request,
    service: ClothingService = Depends(_clothing),
):
    item_uuid = parse_item_id(item_id)
    fields, image = await _parse_item_payload(request)
    return await service.update_item(item_uuid, fields, image)


@router.delete("/{item_id}", status_code=204)
async def delete_clothing(
    item_id: str,
    service: ClothingService = Depends(_clothing),
):
    await service.delete_item(parse_item_id(item_id))
    return Response(status_code=204)
