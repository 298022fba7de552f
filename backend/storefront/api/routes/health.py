import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from storefront.core.clock import isoformat_z, utc_now
from storefront.core.config import get_settings
from storefront.db.redis import redis_ready

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Liveness check for the load balancer.

    Returns 503 during graceful shutdown so traffic drains.
    """
    settings = get_settings()
    if getattr(request.app.state, "shutting_down", False):
        return JSONResponse(
            status_code=503,
            content={"status": "shutting_down", "version": settings.version},
        )
    return {"status": "healthy", "timestamp": isoformat_z(utc_now()), "version": settings.version}


@router.get("/ready")
async def readiness_check():
    """Readiness check: the key-value store must answer PING."""
    checks = {"redis": await redis_ready()}
    all_healthy = all(checks.values())
    if not all_healthy:
        logger.warning("readiness_degraded", checks=checks)

    return JSONResponse(
        status_code=200 if all_healthy else 503,
        content={"status": "ready" if all_healthy else "degraded", "checks": checks},
    )
