# =============================================================================
# app/__main__.py - Server Entry Point
# =============================================================================
# Usage:
#   poetry run python -m app
#   PORT=3001 poetry run python -m app
# =============================================================================

import uvicorn

from app.config import settings


def main():
    """Run the API with uvicorn on API_HOST:PORT."""
    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )


if __name__ == "__main__":
    main()
