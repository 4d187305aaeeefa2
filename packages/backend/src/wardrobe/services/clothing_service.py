"""Clothing service — listing and owner-guarded mutations.

Learn: Every read and write is scoped to the authenticated owner:
- list: the filter from item_filters always includes ``owner_id``
- update/delete: load by id (404 if absent), then compare the stored
  owner with the caller's id from the verified token (403 if different)

Images are handled through ``ImageStorage``. The image host is not
transactional with the database: on update the old asset is destroyed
before the replacement is uploaded, and nothing is rolled back if the
upload then fails. That gap is known and accepted.
"""

import uuid
from typing import Any, Mapping

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wardrobe.core.exceptions import (
    AuthorizationError,
    MissingFields,
    NotFoundError,
    ValidationError,
    store_errors,
)
from wardrobe.db.models import Category, ClothingItem
from wardrobe.images.storage import ImageStorage
from wardrobe.images.uploads import ImageFile
from wardrobe.schemas.clothing import ClothingItemInput
from wardrobe.services.item_filters import build_item_filter

logger = structlog.get_logger()

ITEM_NOT_FOUND = "Clothing item not found"
NOT_OWNER_UPDATE = "User not authorized to update this item"
NOT_OWNER_DELETE = "User not authorized to delete this item"
REQUIRED_FIELDS = ("name", "category", "color")


def parse_item_id(raw: str) -> uuid.UUID:
    """Malformed ids are indistinguishable from unknown ones: 404."""
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise NotFoundError(ITEM_NOT_FOUND)


def _canonical_category(value: str) -> str:
    category = Category.parse(value)
    if category is None:
        raise ValidationError()
    return category.value


class ClothingService:
    """Business logic for a single owner's clothing items."""

    def __init__(self, db: AsyncSession, images: ImageStorage, owner_id: uuid.UUID):
        self.db = db
        self.images = images
        self.owner_id = owner_id

    # ─── Read ───────────────────────────────────────────

    async def list_items(self, query: Mapping[str, Any]) -> list[ClothingItem]:
        item_filter = build_item_filter(query, self.owner_id)
        logger.info("clothing.list", filters=item_filter.as_dict())
        with store_errors("list clothing items"):
            result = await self.db.execute(
                select(ClothingItem)
                .where(*item_filter.where_clauses())
                .order_by(ClothingItem.created_at)
            )
            items = list(result.scalars().all())
        logger.info("clothing.listed", count=len(items))
        return items

    async def _get_owned(self, item_id: uuid.UUID, not_owner_message: str) -> ClothingItem:
        with store_errors("find clothing item"):
            item = await self.db.get(ClothingItem, item_id)
        if not item:
            raise NotFoundError(ITEM_NOT_FOUND)
        if item.owner_id != self.owner_id:
            logger.warning(
                "clothing.ownership_denied",
                item_id=str(item_id),
                owner_id=str(item.owner_id),
            )
            raise AuthorizationError(not_owner_message)
        return item

    # ─── Create ─────────────────────────────────────────

    async def create_item(
        self, fields: ClothingItemInput, image: ImageFile | None = None
    ) -> ClothingItem:
        if not all(getattr(fields, name) for name in REQUIRED_FIELDS):
            logger.info("clothing.create_rejected", reason="missing_fields")
            raise MissingFields()
        category = _canonical_category(fields.category)

        # Upload first: no row is written unless the image made it
        uploaded = await self.images.upload(image.data, image.filename) if image else None

        item = ClothingItem(
            owner_id=self.owner_id,
            name=fields.name,
            category=category,
            color=fields.color,
            brand=fields.brand or None,
            image_url=uploaded.url if uploaded else None,
            image_asset_id=uploaded.asset_id if uploaded else None,
        )
        with store_errors("create clothing item"):
            self.db.add(item)
            await self.db.commit()
            await self.db.refresh(item)
        logger.info("clothing.created", item_id=str(item.id), has_image=uploaded is not None)
        return item

    # ─── Update ─────────────────────────────────────────

    async def update_item(
        self,
        item_id: uuid.UUID,
        fields: ClothingItemInput,
        image: ImageFile | None = None,
    ) -> ClothingItem:
        item = await self._get_owned(item_id, NOT_OWNER_UPDATE)

        changes = fields.model_dump(exclude_none=True)
        for name in REQUIRED_FIELDS:
            if name in changes and not changes[name]:
                raise ValidationError()
        if "category" in changes:
            changes["category"] = _canonical_category(changes["category"])
        if "brand" in changes:
            changes["brand"] = changes["brand"] or None

        if image:
            if item.image_asset_id:
                logger.info("clothing.replacing_image", item_id=str(item.id))
                await self.images.destroy(item.image_asset_id)
            uploaded = await self.images.upload(image.data, image.filename)
            changes["image_url"] = uploaded.url
            changes["image_asset_id"] = uploaded.asset_id

        with store_errors("update clothing item"):
            for name, value in changes.items():
                setattr(item, name, value)
            await self.db.commit()
            await self.db.refresh(item)
        logger.info("clothing.updated", item_id=str(item.id), fields=sorted(changes))
        return item

    # ─── Delete ─────────────────────────────────────────

    async def delete_item(self, item_id: uuid.UUID) -> None:
        """Delete an item, its hosted image, and its place in the owner's list."""
        item = await self._get_owned(item_id, NOT_OWNER_DELETE)

        if item.image_asset_id:
            await self.images.destroy(item.image_asset_id)

        with store_errors("delete clothing item"):
            await self.db.delete(item)
            await self.db.commit()
        logger.info("clothing.deleted", item_id=str(item_id))
