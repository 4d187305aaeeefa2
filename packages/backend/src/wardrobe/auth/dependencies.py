"""FastAPI auth dependencies.

Learn: ``get_current_user`` is the access guard. It is applied with
Depends() at the router level, so every protected handler runs only
after the access token cookie has been verified.

The token is read from the ``accessToken`` cookie only. An
``Authorization: Bearer`` header is ignored on purpose: tokens never
touch JavaScript-visible storage.
"""

import uuid
from functools import lru_cache

import structlog
from fastapi import Depends, Request

from wardrobe.auth.cookies import ACCESS_COOKIE
from wardrobe.auth.tokens import USER_ID_CLAIM, InvalidToken, TokenService
from wardrobe.config import settings
from wardrobe.core.exceptions import AuthenticationError

logger = structlog.get_logger()

NO_TOKEN = "No token provided, authorization denied"
TOKEN_NOT_VALID = "Token is not valid"


class CurrentUser:
    """The authenticated caller, built from verified access-token claims.

    Learn: Downstream code scopes every query by ``user_id``. It never
    trusts a user id coming from the request body or query string.
    """

    def __init__(self, user_id: str, claims: dict | None = None):
        self.user_id = user_id
        self.claims = claims or {}

    @property
    def id(self) -> uuid.UUID:
        return uuid.UUID(self.user_id)


@lru_cache
def get_token_service() -> TokenService:
    """Token service built once from the process settings."""
    return TokenService(settings)


async def get_current_user(
    request: Request,
    tokens: TokenService = Depends(get_token_service),
) -> CurrentUser:
    """Validate the access token cookie (401 if missing or invalid).

    Expired and malformed tokens produce the identical response.
    """
    token = request.cookies.get(ACCESS_COOKIE)
    if not token:
        logger.info("auth.access_token_missing", path=request.url.path)
        raise AuthenticationError(NO_TOKEN)

    try:
        claims = tokens.verify_access(token)
        user_id = str(uuid.UUID(claims[USER_ID_CLAIM]))
    except (InvalidToken, ValueError):
        logger.info("auth.access_token_rejected", path=request.url.path)
        raise AuthenticationError(TOKEN_NOT_VALID)

    user = CurrentUser(user_id=user_id, claims=claims)
    request.state.user = user
    structlog.contextvars.bind_contextvars(user_id=user.user_id)
    return user
