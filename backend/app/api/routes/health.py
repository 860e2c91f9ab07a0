"""Health Probes — liveness and readiness of the back-office API.

Invariants:
    - GET /health/ answers 200 whenever the process is up
    - GET /health/ready answers 503 unless the database responds and the
      login throttle has been created by the lifespan
    - Neither probe requires a bearer token
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from app.infrastructure import database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE_NAME = "backoffice-api"
SERVICE_VERSION = "1.0.0"


@router.get("/", status_code=status.HTTP_200_OK)
async def liveness():
    return {"status": "healthy", "service": SERVICE_NAME, "version": SERVICE_VERSION}


@router.get("/ready")
async def readiness(request: Request):
    """Report each dependency; any failing check makes the whole probe 503."""
    manager = database.db_manager
    throttle = getattr(request.app.state, "login_throttle", None)
    checks = {
        "database": "healthy" if manager and await manager.health_check() else "unavailable",
        "login_throttle": "healthy" if throttle is not None else "uninitialized",
    }
    if any(state != "healthy" for state in checks.values()):
        logger.warning(f"Readiness failed: {checks}", extra={"path": request.url.path})
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "checks": checks},
        )
    return {"status": "ready", "checks": checks}
