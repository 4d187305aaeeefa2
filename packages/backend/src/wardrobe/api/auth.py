"""Auth API — registration and the cookie session protocol.

Learn: Routes for user authentication:
- POST /auth/register → create a user account
- POST /auth/login → email/password → accessToken + refreshToken cookies
- POST /auth/refresh → refreshToken cookie → new accessToken cookie
- POST /auth/logout → revoke the refresh token, clear both cookies
- GET /auth/me → current user (requires the accessToken cookie)

Response bodies never carry tokens. Routes handle HTTP concerns
(cookies, status codes); SessionService owns the protocol.
"""

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from wardrobe.auth.cookies import (
    REFRESH_COOKIE,
    clear_session_cookies,
    set_access_cookie,
    set_refresh_cookie,
)
from wardrobe.auth.dependencies import CurrentUser, get_current_user, get_token_service
from wardrobe.auth.tokens import TokenService
from wardrobe.config import settings
from wardrobe.core.exceptions import MissingCredentials, NotFoundError
from wardrobe.db.engine import get_db
from wardrobe.schemas.auth import (
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    UserIdResponse,
    UserProfile,
)
from wardrobe.services.session_service import SessionService
from wardrobe.services.user_service import UserService

router = APIRouter(prefix="/auth")


def _sessions(
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> SessionService:
    return SessionService(db, tokens)


# ─── Register ────────────────────────────────────────────


@router.post("/register", response_model=UserIdResponse, status_code=201)
async def register(
    body: RegisterRequest | None = None, db: AsyncSession = Depends(get_db)
):
    """Create a new user account."""
    body = body or RegisterRequest()
    if not body.email or not body.password:
        raise MissingCredentials()

    user = await UserService(db).create_user(
        email=body.email, password=body.password, name=body.name
    )
    return UserIdResponse(message="User created successfully", user_id=user.id)


# ─── Login ───────────────────────────────────────────────


@router.post("/login", response_model=UserIdResponse)
async def login(
    response: Response,
    body: LoginRequest | None = None,
    sessions: SessionService = Depends(_sessions),
):
    """Login with email and password → session cookies."""
    body = body or LoginRequest()
    session = await sessions.login(body.email, body.password)

    set_access_cookie(response, session.access_token, settings)
    set_refresh_cookie(response, session.refresh_token, settings)
    return UserIdResponse(message="Login successful", user_id=session.user_id)


# ─── Refresh ────────────────────────────────────────────


@router.post("/refresh", response_model=MessageResponse)
async def refresh(
    request: Request,
    response: Response,
    sessions: SessionService = Depends(_sessions),
):
    """Exchange the refresh cookie for a new access cookie."""
    access_token = await sessions.refresh(request.cookies.get(REFRESH_COOKIE))

    set_access_cookie(response, access_token, settings)
    return MessageResponse(message="Token refreshed successfully")


# ─── Logout ─────────────────────────────────────────────


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: Request,
    response: Response,
    sessions: SessionService = Depends(_sessions),
):
    """Revoke the session (best effort) and clear both cookies. Always 200."""
    await sessions.logout(request.cookies.get(REFRESH_COOKIE))

    clear_session_cookies(response, settings)
    return MessageResponse(message="Logged out successfully")


# ─── Current user ───────────────────────────────────────


@router.get("/me", response_model=UserProfile)
async def get_me(
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """The authenticated user's profile and owned item ids."""
    user = await UserService(db).get_profile(current.id)
    if not user:
        raise NotFoundError("User not found")
    return user
