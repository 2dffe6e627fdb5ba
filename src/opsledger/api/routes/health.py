"""Liveness, readiness and database health checks (no principal required)."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from opsledger import __version__
from opsledger.api.dependencies import DbSession

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


async def _database_reachable(db: AsyncSession) -> bool:
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning("Database health check failed", exc_info=True)
        return False
    return True


@router.get("/health")
async def health_check(db: DbSession) -> dict[str, str]:
    """Report API version and whether the ledger database answers."""
    reachable = await _database_reachable(db)
    return {
        "status": "healthy" if reachable else "degraded",
        "database": "healthy" if reachable else "unhealthy",
        "version": __version__,
    }


@router.get("/ready")
async def readiness_check(db: DbSession) -> JSONResponse:
    """503 until the database accepts queries."""
    if await _database_reachable(db):
        return JSONResponse({"status": "ready"})
    return JSONResponse({"status": "unavailable"}, status_code=503)


@router.get("/live")
async def liveness_check() -> dict[str, str]:
    return {"status": "alive"}
