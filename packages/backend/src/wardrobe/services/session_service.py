"""Session service — the login / refresh / logout protocol.

Learn: Session state is the user's single ``refresh_token_hash`` slot
plus two cookies held by the client. The state machine:

    (no session) --login--> (fingerprint stored) --logout--> (no session)
                                  |  ^
                                  +--+ refresh (new access token only)

A second login overwrites the slot, which revokes the first session.

Refresh has two barriers. The JWT signature/expiry check alone is not
enough, because a logged-out refresh token stays cryptographically valid
until it expires. The second barrier, comparing its fingerprint with the
stored one, is what makes logout actually revoke.
"""

import hmac
import uuid
from dataclasses import dataclass

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from wardrobe.auth.password import verify_password
from wardrobe.auth.tokens import USER_ID_CLAIM, InvalidToken, TokenService
from wardrobe.core.exceptions import (
    InvalidCredentials,
    InvalidRefreshToken,
    MissingCredentials,
    NoRefreshToken,
    WardrobeError,
)
from wardrobe.services.user_service import UserService

logger = structlog.get_logger()


@dataclass(frozen=True)
class IssuedSession:
    """Tokens minted by a successful login. Only ever written to cookies."""

    user_id: uuid.UUID
    access_token: str
    refresh_token: str


class SessionService:
    """Login, refresh and logout on top of the credential store."""

    def __init__(self, db: AsyncSession, tokens: TokenService):
        self.db = db
        self.tokens = tokens
        self.users = UserService(db)

    async def login(self, email: str | None, password: str | None) -> IssuedSession:
        """Verify credentials and open a new session.

        Unknown email and wrong password raise the same InvalidCredentials,
        so the response never reveals which accounts exist.
        """
        if not email or not password:
            raise MissingCredentials()

        user = await self.users.get_by_email(email)
        if not user:
            logger.info("auth.login_failed", reason="unknown_email")
            raise InvalidCredentials()
        if not verify_password(password, user.password_hash):
            logger.info("auth.login_failed", reason="bad_password", user_id=str(user.id))
            raise InvalidCredentials()

        access_token = self.tokens.issue_access_token(str(user.id))
        refresh_token = self.tokens.issue_refresh_token(str(user.id))
        await self.users.set_refresh_token_hash(
            user.id, self.tokens.fingerprint(refresh_token)
        )

        logger.info("auth.login_succeeded", user_id=str(user.id))
        return IssuedSession(
            user_id=user.id,
            access_token=access_token,
            refresh_token=refresh_token,
        )

    async def refresh(self, refresh_token: str | None) -> str:
        """Exchange a live refresh token for a new access token.

        The refresh token itself is not rotated.
        """
        if not refresh_token:
            raise NoRefreshToken()

        try:
            claims = self.tokens.verify_refresh(refresh_token)
            user_id = uuid.UUID(claims[USER_ID_CLAIM])
        except (InvalidToken, ValueError):
            logger.info("auth.refresh_rejected", reason="unverifiable")
            raise InvalidRefreshToken()

        user = await self.users.get_with_refresh_hash(user_id)
        if not user or not user.refresh_token_hash:
            logger.info("auth.refresh_rejected", reason="no_session", user_id=str(user_id))
            raise InvalidRefreshToken()

        presented = self.tokens.fingerprint(refresh_token)
        if not hmac.compare_digest(presented, user.refresh_token_hash):
            logger.info("auth.refresh_rejected", reason="revoked", user_id=str(user_id))
            raise InvalidRefreshToken()

        logger.info("auth.refresh_succeeded", user_id=str(user_id))
        return self.tokens.issue_access_token(str(user_id))

    async def logout(self, refresh_token: str | None) -> None:
        """Best-effort server-side revocation. Never raises.

        Cookies are cleared by the caller regardless; a store failure here
        is logged and swallowed so the client always gets logged out.
        """
        if not refresh_token:
            logger.info("auth.logout", revoked=0)
            return

        try:
            revoked = await self.users.clear_refresh_token_hash(
                self.tokens.fingerprint(refresh_token)
            )
        except (WardrobeError, SQLAlchemyError, OSError) as e:
            logger.warning("auth.logout_revocation_failed", error=type(e).__name__)
            return
        logger.info("auth.logout", revoked=revoked)
