"""
Animal Rescue API — Health Check Route
=======================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Runs `SELECT 1` through the shared Database handle.
Who:   Called by container health checks, load balancers, uptime monitors.

Status levels:
    ok:        database answered
    degraded:  database did not answer (still HTTP 200; the body says why)
"""

import logging
import time

from fastapi import APIRouter, Request

from rescue_api import __version__
from rescue_api.schemas.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Probe the database and report the caller, status and uptime."""
    database = getattr(request.app.state, "database", None)
    connected = database is not None and await database.ping()
    if not connected:
        logger.warning("Health check: database unreachable")

    return HealthResponse(
        caller=request.client.host if request.client else "unknown",
        status="ok" if connected else "degraded",
        database="ok" if connected else "not_connected",
        version=__version__,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
