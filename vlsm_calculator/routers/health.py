"""Health check endpoints.

These endpoints are used by container orchestrators (Kubernetes, Container Apps)
to determine application health, readiness, and liveness.

- /health: General health check (no auth required)
- /health/ready: Readiness probe (can accept traffic?)
- /health/live: Liveness probe (is the app running?)
"""

from fastapi import APIRouter

from .. import __version__

router = APIRouter(prefix="/api/v1", tags=["health"])


@router.get("/health")
async def health_check():
    """Health check endpoint (no authentication required)."""
    return {
        "status": "healthy",
        "service": "VLSM Calculator API",
        "version": __version__,
    }


@router.get("/health/ready")
async def readiness_check():
    """Readiness check for Kubernetes/Container Apps.

    The calculator has no external dependencies, so it is ready as soon as
    it is serving.
    """
    return {"status": "ready"}


@router.get("/health/live")
async def liveness_check():
    """Liveness check for Kubernetes/Container Apps."""
    return {"status": "alive"}
