# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# Neither endpoint touches storage; /api/health reports the store's last
# known connectivity state.
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from app.dependencies import StoreDep

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class RootResponse(BaseModel):
    """Liveness/info response for GET /."""
    success: bool = True
    message: str
    status: str
    timestamp: str


class HealthResponse(BaseModel):
    """Health response including storage connectivity."""
    success: bool = True
    message: str
    database: str
    environment: str
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/", response_model=RootResponse)
async def root():
    """
    Root endpoint - returns service status.
    """
    return RootResponse(
        message="NITJ Quiz Backend is running!",
        status="healthy",
        timestamp=_now(),
    )


@router.get("/api/health", response_model=HealthResponse)
async def health_check(store: StoreDep):
    """
    Health check endpoint.

    Returns "connected" or "disconnected" for storage. The service stays
    up while storage is unavailable.
    """
    return HealthResponse(
        message="Quiz backend is running!",
        database="connected" if store.connected else "disconnected",
        environment=settings.ENVIRONMENT,
        timestamp=_now(),
    )
