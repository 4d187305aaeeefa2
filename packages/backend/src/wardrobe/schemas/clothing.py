"""Pydantic schemas for clothing items.

Learn: Responses use camelCase keys (``imageUrl``, ``createdAt``) for the
web client, while Python code keeps snake_case attribute names. Only the
serialization alias changes, so models still validate straight from ORM
objects.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ClothingItemInput(BaseModel):
    """Fields accepted on create and update (all optional at this layer).

    Create requires name/category/color; update changes only what is sent.
    Owner and image fields are never accepted from the client.
    """

    name: Optional[str] = Field(None, max_length=200)
    category: Optional[str] = Field(None, max_length=20)
    color: Optional[str] = Field(None, max_length=50)
    brand: Optional[str] = Field(None, max_length=100)

    model_config = ConfigDict(extra="ignore")


class ClothingItemRead(BaseModel):
    id: uuid.UUID
    owner_id: uuid.UUID = Field(serialization_alias="owner")
    name: str
    category: str
    color: str
    brand: Optional[str] = None
    image_url: Optional[str] = None
    image_asset_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=AliasGenerator(serialization_alias=to_camel),
    )
