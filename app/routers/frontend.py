# =============================================================================
# app/routers/frontend.py - Static Files & SPA Fallback
# =============================================================================
# Any GET that no API route matched lands here. Existing files under
# STATIC_DIR are served as-is; everything else gets index.html so the
# front-end router can handle the path.
#
# This router must be included last.
# =============================================================================

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

from app.config import settings
from app.exceptions import QuizException

router = APIRouter()

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def static_root() -> Path:
    """STATIC_DIR, with relative paths taken from the project root."""
    return PROJECT_ROOT / settings.STATIC_DIR


def resolve_static_path(static_dir: Path, requested: str) -> Path:
    """
    Map a request path to a file to send.

    Paths that escape static_dir or do not name a file fall back to
    index.html.
    """
    root = static_dir.resolve()
    if requested:
        candidate = (root / requested).resolve()
        if candidate.is_relative_to(root) and candidate.is_file():
            return candidate
    return root / "index.html"


@router.get("/{full_path:path}", include_in_schema=False)
async def spa_fallback(full_path: str):
    """Serve a static asset, or the SPA entry document."""
    path = resolve_static_path(static_root(), full_path)
    if not path.is_file():
        raise QuizException("Not found", code="NOT_FOUND", status_code=404)
    return FileResponse(path)
