# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the NITJ Quiz API:
# - test_models.py: Submission schema validation and serialization
# - test_supabase_client.py: Store queries and error translation (mocked client)
# - test_submission_service.py: Concurrency and storage-error mapping
# - test_submissions_api.py: HTTP tests for /submit and admin routes
# - test_app.py: Health, SPA fallback, lifespan, configuration
#
# Run tests with: poetry run pytest
# =============================================================================
