# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Submission store backed by a Supabase table
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import (
    DuplicateEmailError,
    SchemaViolationError,
    SubmissionStore,
    SupabaseClientError,
)

__all__ = [
    "DuplicateEmailError",
    "SchemaViolationError",
    "SubmissionStore",
    "SupabaseClientError",
]
