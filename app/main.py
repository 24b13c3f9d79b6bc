# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the NITJ Quiz API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   poetry run uvicorn app.main:app --reload
#   poetry run python -m app
# =============================================================================

import asyncio
import logging
import os
import sys
import threading
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.exceptions import (
    QuizException,
    http_exception_handler,
    quiz_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from app.routers import frontend, health, submissions
from lib.supabase_client import SubmissionStore

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# =============================================================================
# Process-level failure handling
# =============================================================================
# An exception nobody handled means state may be inconsistent: log it and
# terminate instead of continuing.

def _fatal_excepthook(exc_type, exc, tb):
    logger.critical("Uncaught exception", exc_info=(exc_type, exc, tb))
    sys.exit(1)


def _fatal_thread_excepthook(args: threading.ExceptHookArgs) -> None:
    if args.exc_type is SystemExit:
        return
    logger.critical(
        f"Uncaught exception in thread {args.thread.name if args.thread else '?'}",
        exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
    )
    logging.shutdown()
    os._exit(1)


def _loop_exception_handler(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    exc = context.get("exception")
    if exc is None:
        loop.default_exception_handler(context)
        return
    logger.critical(f"Unhandled asyncio error: {context.get('message')}", exc_info=exc)
    logging.shutdown()
    os._exit(1)


def install_fatal_handlers(loop: asyncio.AbstractEventLoop) -> None:
    """Make uncaught exceptions (any thread) and unretrieved task errors fatal."""
    sys.excepthook = _fatal_excepthook
    threading.excepthook = _fatal_thread_excepthook
    loop.set_exception_handler(_loop_exception_handler)


def build_store() -> SubmissionStore:
    """Create the process-wide store from settings."""
    return SubmissionStore(
        url=settings.SUPABASE_URL,
        key=settings.SUPABASE_SERVICE_KEY,
        table=settings.SUBMISSIONS_TABLE,
        connect_timeout=settings.STORAGE_CONNECT_TIMEOUT_SECONDS,
        socket_timeout=settings.STORAGE_SOCKET_TIMEOUT_SECONDS,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: create the store, probe it once, schedule a single retry if
      the probe failed. The server starts either way.
    - Shutdown: cancel a pending retry, close the store.
    """
    install_fatal_handlers(asyncio.get_running_loop())

    logger.info(f"Starting NITJ Quiz API in {settings.ENVIRONMENT} mode")
    logger.info(f"Port: {settings.PORT}")
    logger.info(f"Storage URL configured: {bool(settings.SUPABASE_URL)}")

    store = build_store()
    app.state.store = store
    app.state.retry_task = None

    if not await store.connect():
        logger.warning(
            f"Starting without storage; retrying in {settings.STORAGE_RETRY_DELAY_SECONDS}s"
        )
        app.state.retry_task = asyncio.create_task(
            store.retry_connect(settings.STORAGE_RETRY_DELAY_SECONDS)
        )

    yield

    logger.info("Shutting down NITJ Quiz API")

    retry_task = app.state.retry_task
    if retry_task and not retry_task.done():
        retry_task.cancel()
        try:
            await retry_task
        except asyncio.CancelledError:
            pass

    await store.close()
    logger.info("Server closed")


# Create FastAPI application
app = FastAPI(
    title="NITJ Quiz API",
    description="""
## Quiz Answer Submissions

Accepts one answer per `@nitj.ac.in` email address and lets operators
list and delete submissions.

Every response uses the envelope `{"success": bool, "message": str, ...}`.

> Admin routes are not authenticated.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Submissions",
            "description": "Submit a quiz answer",
        },
        {
            "name": "Admin",
            "description": "List and delete submissions (unauthenticated)",
        },
        {
            "name": "Health",
            "description": "API health and storage connectivity",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

app.add_exception_handler(QuizException, quiz_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


# =============================================================================
# Routers
# =============================================================================

# Health check endpoints (/ and /api/health)
app.include_router(health.router, tags=["Health"])

# Submission endpoints (/submit, /admin/submissions)
app.include_router(submissions.router)

# Static files and SPA fallback - must stay last
app.include_router(frontend.router)
