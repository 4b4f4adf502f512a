"""System health endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from unique_numbers.api.dependencies import SessionDep
from unique_numbers.core.settings import settings
from unique_numbers.db.time import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/health")
def get_system_health(db: SessionDep) -> dict[str, object]:
    """Health check that also verifies the database is reachable.

    Args:
        db: Database session

    Returns:
        Dictionary with overall status, component health and version info
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError as e:
        logger.warning("Database health check failed: %s", e)
        db_status = f"unhealthy: {e}"

    return {
        "status": "healthy" if db_status == "healthy" else "unhealthy",
        "timestamp": utcnow().isoformat(),
        "components": {
            "database": db_status,
        },
        "version": settings.app_version,
    }
