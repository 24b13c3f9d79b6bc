# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - main.py: App entry point, lifespan, middleware, error handlers
# - config.py: Environment variable loading and settings
# - exceptions.py: API exceptions and the JSON error envelope
# - dependencies.py: Store / service / client-IP injection
# - routers/: API endpoint definitions organized by feature
#
# The app layer is thin - it handles HTTP concerns and delegates
# business logic to the core/ package.
# =============================================================================
