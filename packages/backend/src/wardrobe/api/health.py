"""Health check endpoint.

Learn: Simple GET endpoint that verifies the server is running and the
database is reachable. Never requires auth.
"""

import structlog
from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from wardrobe import __version__
from wardrobe.db.engine import engine

router = APIRouter()
logger = structlog.get_logger()


@router.get("/health")
async def health_check():
    """Check server health and database connectivity."""
    checks = {"server": "ok", "version": __version__}

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except (SQLAlchemyError, OSError) as e:
        logger.warning("health.database_unreachable", error=str(e))
        checks["database"] = "error"

    status = "healthy" if checks["database"] == "ok" else "degraded"
    return {"status": status, **checks}
