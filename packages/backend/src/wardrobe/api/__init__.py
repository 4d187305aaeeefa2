"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter. This protects every clothing route without
touching individual handlers. Health and auth routers are open; the
one auth route that needs a user (/auth/me) asks for it itself.
"""

from fastapi import APIRouter, Depends

from wardrobe.api.auth import router as auth_router
from wardrobe.api.clothing import router as clothing_router
from wardrobe.api.health import router as health_router
from wardrobe.auth.dependencies import get_current_user

_auth = [Depends(get_current_user)]

api_router = APIRouter(prefix="/api")

# Open routes: no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes: require the accessToken cookie
api_router.include_router(clothing_router, tags=["clothing"], dependencies=_auth)
