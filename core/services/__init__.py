# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .submission_service import SubmissionService

__all__ = [
    "SubmissionService",
]
