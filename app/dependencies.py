# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request

from core.services.submission_service import SubmissionService
from lib.supabase_client import SubmissionStore


def get_store(request: Request) -> SubmissionStore:
    """
    Get the process-wide submission store.

    The store is created by the lifespan handler and kept on app.state.
    """
    return request.app.state.store


def get_submission_service(
    store: Annotated[SubmissionStore, Depends(get_store)],
) -> SubmissionService:
    """Build a SubmissionService around the shared store."""
    return SubmissionService(store)


def get_client_ip(request: Request) -> str | None:
    """
    Originating client address.

    The X-Forwarded-For header wins when present (stored as sent),
    otherwise the connection peer address is used.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded
    if request.client:
        return request.client.host
    return None


# Type aliases for dependency injection
StoreDep = Annotated[SubmissionStore, Depends(get_store)]
SubmissionServiceDep = Annotated[SubmissionService, Depends(get_submission_service)]
ClientIPDep = Annotated[str | None, Depends(get_client_ip)]
