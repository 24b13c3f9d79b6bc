# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Liveness and storage health endpoints
# - submissions.py: Quiz submission and admin endpoints
# - frontend.py: Static assets and SPA fallback (mounted last)
#
# Each router is included in main.py.
# =============================================================================

from . import frontend
from . import health
from . import submissions

__all__ = [
    "frontend",
    "health",
    "submissions",
]
