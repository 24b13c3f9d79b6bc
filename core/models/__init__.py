# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - submission.py: Submission request, storage record, and response schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

from .submission import (
    ANSWER_MAX_LENGTH,
    ANSWER_MIN_LENGTH,
    EMAIL_DOMAIN,
    EMAIL_SUFFIX,
    MessageResponse,
    SubmissionList,
    SubmissionOut,
    SubmissionRecord,
    SubmitRequest,
    SubmitResponse,
    normalize_email,
)

__all__ = [
    "ANSWER_MAX_LENGTH",
    "ANSWER_MIN_LENGTH",
    "EMAIL_DOMAIN",
    "EMAIL_SUFFIX",
    "MessageResponse",
    "SubmissionList",
    "SubmissionOut",
    "SubmissionRecord",
    "SubmitRequest",
    "SubmitResponse",
    "normalize_email",
]
