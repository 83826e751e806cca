"""Health check endpoints."""
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request

from push_relay.config.relay import RelaySettings, get_settings
from push_relay.database.connection import get_database_manager

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict[str, Any]:
    """
    Basic health check endpoint.

    Returns liveness information without touching external dependencies.
    """
    return {
        "status": "OK",
        "message": "Firebase Notification Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/ready")
async def readiness_check(
    request: Request,
    settings: RelaySettings = Depends(get_settings),
) -> dict[str, Any]:
    """
    Readiness check.

    Checks the dependencies every request path needs:
    - Database connectivity
    - Messaging client and webhook secret configuration
    """
    checks = {}
    overall_status = "ready"

    try:
        database_healthy = await get_database_manager().health_check()
        checks["database"] = {"status": "healthy" if database_healthy else "unhealthy"}
        if not database_healthy:
            overall_status = "not_ready"
            logger.error("Database health check failed")
    except Exception as e:
        checks["database"] = {"status": "error", "error": str(e)}
        overall_status = "not_ready"
        logger.error(f"Database check error: {e}")

    messaging_ready = getattr(request.app.state, "messaging", None) is not None
    checks["messaging"] = {"status": "configured" if messaging_ready else "not_configured"}
    if not messaging_ready:
        overall_status = "not_ready"

    checks["shopify_webhook_secret"] = {
        "status": "configured" if settings.webhook_secret_configured else "not_configured"
    }
    if not settings.webhook_secret_configured:
        overall_status = "not_ready"

    response_data = {
        "status": overall_status,
        "service": settings.SERVICE_NAME,
        "checks": checks,
    }

    if overall_status != "ready":
        raise HTTPException(status_code=503, detail=response_data)

    return response_data
