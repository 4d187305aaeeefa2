"""User service — the credential store.

Learn: Service layer separates business logic from HTTP routing.
This one owns everything persisted about a user's credentials: the
bcrypt password hash and the single refresh-token fingerprint slot.

The fingerprint column is deferred on the model, so ordinary reads never
carry it. Only ``get_with_refresh_hash`` loads it.
"""

import uuid

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload, undefer

from wardrobe.auth.password import hash_password
from wardrobe.core.exceptions import ConflictError, store_errors
from wardrobe.db.models import User

logger = structlog.get_logger()

EMAIL_EXISTS = "Email already exists"


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """Business logic for user records."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_user(
        self, email: str, password: str, name: str | None = None
    ) -> User:
        """Register a user. Raises ConflictError if the email is taken."""
        email = normalize_email(email)
        with store_errors("create user"):
            if await self.get_by_email(email):
                raise ConflictError(EMAIL_EXISTS)

            user = User(email=email, name=name, password_hash=hash_password(password))
            self.db.add(user)
            try:
                await self.db.commit()
            except IntegrityError:
                # Lost a race with a concurrent registration
                await self.db.rollback()
                raise ConflictError(EMAIL_EXISTS)
            await self.db.refresh(user)
        logger.info("auth.user_registered", user_id=str(user.id))
        return user

    async def get_by_email(self, email: str) -> User | None:
        with store_errors("find user by email"):
            result = await self.db.execute(
                select(User).where(User.email == normalize_email(email))
            )
            return result.scalars().first()

    async def get_profile(self, user_id: uuid.UUID) -> User | None:
        """User with its clothing items loaded (for ``clothing_item_ids``)."""
        with store_errors("load user profile"):
            result = await self.db.execute(
                select(User)
                .where(User.id == user_id)
                .options(selectinload(User.clothing_items))
                .execution_options(populate_existing=True)
            )
            return result.scalars().first()

    async def get_with_refresh_hash(self, user_id: uuid.UUID) -> User | None:
        """Load a user including the normally hidden fingerprint column."""
        with store_errors("load user session"):
            result = await self.db.execute(
                select(User)
                .where(User.id == user_id)
                .options(undefer(User.refresh_token_hash))
                .execution_options(populate_existing=True)
            )
            return result.scalars().first()

    async def set_refresh_token_hash(
        self, user_id: uuid.UUID, token_hash: str | None
    ) -> None:
        """Overwrite the user's session slot (login stores, None clears)."""
        with store_errors("store session fingerprint"):
            await self.db.execute(
                update(User)
                .where(User.id == user_id)
                .values(refresh_token_hash=token_hash)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()

    async def clear_refresh_token_hash(self, token_hash: str) -> int:
        """Revoke whichever session holds this fingerprint.

        Looks up by hash, not by user id: the token may be expired or
        otherwise unverifiable by the time the user logs out.
        Returns the number of sessions cleared (0 or 1).
        """
        with store_errors("revoke session"):
            result = await self.db.execute(
                update(User)
                .where(User.refresh_token_hash == token_hash)
                .values(refresh_token_hash=None)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
            return result.rowcount or 0
