"""
Users API — Health Check Route
================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Pings the document store and reports its status with uptime.
Who:   Called by Docker health checks, load balancers, and monitoring systems.

Status levels:
    - healthy:   store answers the ping
    - unhealthy: store unreachable (the endpoint itself still answers 200;
                 monitors key off the `status` field)
"""

import logging
import time

from fastapi import APIRouter, Request

from users_api import __version__
from users_api.schemas.user import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Returns the health status of the service and its document store.",
)
async def health_check(request: Request) -> HealthResponse:
    """
    Check the health of the service and its store.

    The store check is DocumentStore.ping(): `SELECT 1` on SQL backends,
    the `ping` admin command on MongoDB. ping() never raises.
    """
    store = request.app.state.store
    if await store.ping():
        db_status, overall = "connected", "healthy"
    else:
        db_status, overall = "disconnected", "unhealthy"
        logger.warning("Health check: document store unreachable")

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
