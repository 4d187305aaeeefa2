"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan handles startup (logging, Cloudinary) and shutdown
(database pool). Middleware, CORS, error handlers and routers are all
registered here; each concern lives in its own module.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from wardrobe import __version__
from wardrobe.api import api_router
from wardrobe.config import settings
from wardrobe.core.exceptions import (
    WardrobeError,
    generic_exception_handler,
    http_exception_handler,
    request_validation_handler,
    wardrobe_exception_handler,
)
from wardrobe.images.storage import initialize_cloudinary
from wardrobe.log_config import configure_logging
from wardrobe.middleware.request_id import RequestIdMiddleware
from wardrobe.middleware.security import SecurityHeadersMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs
    at shutdown.
    """
    configure_logging(settings)
    logger.info(
        "wardrobe.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    if initialize_cloudinary(settings):
        logger.info("wardrobe.cloudinary_configured", folder=settings.cloudinary_folder)
    else:
        # Items without photos still work; uploads answer 500
        logger.warning("wardrobe.cloudinary_unconfigured")

    yield

    logger.info("wardrobe.shutdown")
    from wardrobe.db.engine import engine
    await engine.dispose()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="Wardrobe API",
        description="Personal wardrobe catalog with cookie-based sessions",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Starlette runs middleware in reverse order of registration.
    # Request flow: CORS → Security → RequestId → handler
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # ── Error handlers ───────────────────────────────────────
    app.add_exception_handler(WardrobeError, wardrobe_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    async def root():
        return "Wardrobe API is running!"

    app.include_router(api_router)
    return app


# Default app instance (used by uvicorn: wardrobe.main:app)
app = create_app()
