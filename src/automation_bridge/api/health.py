"""Health and service information endpoints."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from automation_bridge import __version__
from automation_bridge.config import Settings, get_settings
from automation_bridge.database.session import check_connection

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(settings: Settings = Depends(get_settings)):
    """Liveness check."""
    return {"status": "healthy", "service": settings.service_name, "version": __version__}


@router.get("/ready", status_code=status.HTTP_200_OK)
async def readiness_check(settings: Settings = Depends(get_settings)):
    """Readiness check: the credential store must be reachable."""
    if not await check_connection():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "service": settings.service_name},
        )
    return {"status": "ready", "service": settings.service_name}


@router.get("/", status_code=status.HTTP_200_OK)
async def root(settings: Settings = Depends(get_settings)):
    """Root endpoint with service information."""
    return {
        "service": settings.service_name,
        "version": __version__,
        "status": "running",
        "endpoints": {
            "health": "/health",
            "ready": "/ready",
            "install": "/install",
            "oauth_callback": "/auth/callback",
            "webhooks": "/webhooks/events",
        },
    }
