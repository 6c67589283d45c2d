"""
Petly Backend: Health Check Route
===================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Checks the database and the Petfinder catalog and returns an
       aggregate status.
Who:   Called by Docker health checks, load balancers and monitoring.

Status levels:
    healthy:   database connected, Petfinder available or disabled
    degraded:  database connected, Petfinder configured but unreachable
               (local data is still served)
    unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response, status

from petly import __version__
from petly.dependencies import get_catalog, get_executor
from petly.exceptions import DatabaseError
from petly.schemas.common import HealthResponse
from petly.services.catalog_base import ExternalCatalog
from petly.services.query import QueryExecutor

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/api/health",
    response_model=HealthResponse,
    summary="Service health check",
    description=(
        "Returns the health status of the backend and its dependencies. "
        "Responds 503 when the database is unreachable."
    ),
)
async def health_check(
    response: Response,
    db: QueryExecutor = Depends(get_executor),
    catalog: ExternalCatalog = Depends(get_catalog),
) -> HealthResponse:
    """
    Lightweight probes only: SELECT 1 against the database and a token
    request against Petfinder (no search quota is spent).
    """
    db_status = "connected"
    petfinder_status = "available"
    overall = "healthy"

    # ── Check Database ────────────────────────────────────────────────────
    try:
        await db.execute("SELECT 1")
    except DatabaseError as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", e.message)

    # ── Check Petfinder ───────────────────────────────────────────────────
    if not getattr(catalog, "enabled", True):
        petfinder_status = "disabled"
    elif not await catalog.health_check():
        petfinder_status = "unavailable"
        overall = "degraded" if overall != "unhealthy" else overall

    if overall == "unhealthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        petfinder=petfinder_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
