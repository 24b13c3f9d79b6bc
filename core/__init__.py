# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the quiz business logic:
# - models/: Pydantic schemas for requests, stored records and responses
# - services/: Submission validation and storage-error mapping
# =============================================================================
