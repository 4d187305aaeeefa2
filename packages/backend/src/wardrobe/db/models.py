"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Alembic migrations in db/migrations mirror these tables.

Key concepts:
- UUID primary keys (generic ``Uuid`` type, works on PostgreSQL and SQLite)
- ``refresh_token_hash`` is deferred: ordinary reads never load it, the
  session protocol asks for it explicitly with ``undefer()``
- Ownership is a plain foreign key; the API layer enforces it on every read/write
"""

import enum
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_uuid() -> uuid.UUID:
    return uuid.uuid4()


class Category(str, enum.Enum):
    """Fixed clothing categories. Stored in uppercase canonical form."""

    SHIRT = "SHIRT"
    PANTS = "PANTS"
    SHOES = "SHOES"
    JACKET = "JACKET"
    ACCESSORY = "ACCESSORY"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: str) -> Optional["Category"]:
        """Case-insensitive lookup. Returns None for unknown values."""
        try:
            return cls(value.upper())
        except ValueError:
            return None


class User(Base):
    """A registered user.

    Learn: One refresh-token fingerprint slot per user. A new login
    overwrites it, which silently revokes the previous session. There is
    no sessions table on purpose: one active session per user.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=new_uuid
    )
    name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True
    )  # nullable for external identity providers
    refresh_token_hash: Mapped[Optional[str]] = mapped_column(
        String(64), nullable=True, index=True, deferred=True
    )  # SHA-256 hex of the active refresh token
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(),
        onupdate=utcnow,
    )

    # Relationships
    clothing_items: Mapped[list["ClothingItem"]] = relationship(
        back_populates="owner",
        order_by="ClothingItem.created_at",
        passive_deletes=True,
    )

    @property
    def clothing_item_ids(self) -> list[uuid.UUID]:
        """Owned item ids, oldest first. Requires ``clothing_items`` loaded."""
        return [item.id for item in self.clothing_items]


class ClothingItem(Base):
    """A piece of clothing owned by exactly one user.

    Learn: ``image_url`` and ``image_asset_id`` travel together: both set
    after an upload, both null otherwise. The asset id is what the image
    host needs to destroy the file later.
    """

    __tablename__ = "clothing_items"
    __table_args__ = (
        Index("idx_clothing_items_owner", "owner_id"),
        CheckConstraint(
            "(image_url IS NULL AND image_asset_id IS NULL) OR "
            "(image_url IS NOT NULL AND image_asset_id IS NOT NULL)",
            name="ck_clothing_items_image_pair",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=new_uuid
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str] = mapped_column(String(20), nullable=False)
    color: Mapped[str] = mapped_column(String(50), nullable=False)
    brand: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_asset_id: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(),
        onupdate=utcnow,
    )

    # Relationships
    owner: Mapped["User"] = relationship(back_populates="clothing_items")
