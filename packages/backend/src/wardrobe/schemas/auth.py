"""Pydantic schemas for registration, login and session responses.

Learn: Request fields are Optional on purpose. A missing email or
password is answered with the API's own 400 message instead of
FastAPI's generic validation error.

Tokens never appear in any response model. They only travel in cookies.
"""

import uuid
from typing import Optional

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_camel = ConfigDict(
    from_attributes=True,
    alias_generator=AliasGenerator(serialization_alias=to_camel),
)


# ─── Requests ───────────────────────────────────────────

class RegisterRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, max_length=255)
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


# ─── Responses ──────────────────────────────────────────

class MessageResponse(BaseModel):
    message: str


class UserIdResponse(MessageResponse):
    """Register/login result: a message and the user id, nothing else."""
    user_id: uuid.UUID

    model_config = _camel


class UserProfile(BaseModel):
    id: uuid.UUID
    email: str
    name: Optional[str] = None
    clothing_item_ids: list[uuid.UUID] = []

    model_config = _camel
