"""
TripLink Backend — Health Check Route
=======================================

What:  GET /api/health for monitoring and load balancer probes.
How:   Runs SELECT 1 through the request's session and reports the result.
Who:   Docker health checks, load balancers, uptime monitors.

Status levels:
    ok:        database reachable
    degraded:  database unreachable; the endpoint itself still answers 200 so
               probes can tell "process up, store down" apart from "process down"
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from triplink import __version__
from triplink.config import settings
from triplink.database import get_db_session
from triplink.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(db: AsyncSession = Depends(get_db_session)) -> HealthResponse:
    db_status = "connected"
    overall = "ok"

    # ── Check Database ────────────────────────────────────────────────────
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "degraded"
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        environment=settings.environment,
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        database=db_status,
    )
