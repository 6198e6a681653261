"""Health check endpoints."""
from fastapi import APIRouter
from typing import Dict, Any
from gamehive.server.settings import settings

router = APIRouter()


@router.get("/healthz")
async def health_check() -> Dict[str, str]:
    """Basic health check endpoint.

    Returns:
        Simple status response
    """
    return {"status": "ok"}


@router.get("/readyz")
async def readiness_check() -> Dict[str, Any]:
    """Readiness check endpoint.

    Checks that the selected storage backend and RAWG are configured.

    Returns:
        Status response with readiness info
    """
    backend = settings.STORAGE_BACKEND
    if backend == "firebase":
        storage_ready = bool(settings.FIREBASE_API_KEY and settings.FIREBASE_DATABASE_URL)
    elif backend == "mongo":
        storage_ready = bool(settings.MONGODB_URL)
    else:
        storage_ready = backend == "memory"

    checks = {
        "storage_backend": storage_ready,
        "rawg_api_key": bool(settings.RAWG_API_KEY),
    }

    ready = all(checks.values())

    return {
        "status": "ok" if ready else "not_ready",
        "backend": backend,
        "checks": checks,
    }
