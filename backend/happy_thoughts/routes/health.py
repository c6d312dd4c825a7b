"""
Happy Thoughts Backend — Health Check and Endpoint Listing
===========================================================

What:  GET /health (database probe) and GET / (list of registered routes).
Why:   Load balancers and Docker need a liveness signal; API consumers get a
       quick map of the available endpoints without opening /docs.
How:   The health check runs SELECT 1 through the engine the app was built
       with; the listing reads the paths of the app's OpenAPI schema.

Status levels:
    - healthy:   database reachable
    - unhealthy: database unreachable (still HTTP 200, the process is alive)
"""

import logging
import time
from typing import List

from fastapi import APIRouter, Request
from sqlalchemy import text

from happy_thoughts import __version__
from happy_thoughts.schemas.thought import HealthResponse, RouteDescriptor

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()

HTTP_METHODS = {"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS", "TRACE"}


@router.get(
    "/",
    response_model=List[RouteDescriptor],
    summary="List API endpoints",
)
async def list_endpoints(request: Request) -> List[RouteDescriptor]:
    """
    One descriptor per path, methods merged and sorted.

    Built from the OpenAPI schema rather than `app.routes`: the schema holds
    every included router's operations and already leaves out the docs pages.
    """
    paths = request.app.openapi().get("paths", {})
    return [
        RouteDescriptor(
            path=path,
            methods=sorted(m.upper() for m in operations if m.upper() in HTTP_METHODS),
        )
        for path, operations in sorted(paths.items())
    ]


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    """
    Check that the database answers a trivial query.

    Never raises: a failed probe is reported in the body and logged.
    """
    db_status = "connected"
    overall = "healthy"

    try:
        async with request.app.state.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
