# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - InMemorySubmissionStore: same interface as SubmissionStore, with the
#   email UNIQUE constraint enforced atomically, so API tests never touch
#   a real database
# - `client` fixture: TestClient with the store dependency overridden
# =============================================================================

import asyncio
import os
from datetime import datetime

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from app.dependencies import get_store
from app.main import app
from lib.supabase_client import DuplicateEmailError, SupabaseClientError


# =============================================================================
# In-memory store
# =============================================================================

class InMemorySubmissionStore:
    """
    Test double for SubmissionStore.

    Rows are kept in a dict keyed by email; insert checks and writes in
    one step, which gives the same guarantee as the table's UNIQUE constraint.
    `find_by_email` yields to the event loop so concurrent submissions can
    both pass the application pre-check.
    """

    def __init__(self, connected: bool = True):
        self.rows: dict[str, dict] = {}
        self.connected = connected
        self.fail_with: SupabaseClientError | None = None
        self.closed = False

    def _maybe_fail(self):
        if self.fail_with is not None:
            raise self.fail_with

    async def connect(self) -> bool:
        return self.connected

    async def retry_connect(self, delay: float) -> bool:
        await asyncio.sleep(delay)
        return await self.connect()

    async def close(self) -> None:
        self.closed = True

    async def find_by_email(self, email: str):
        self._maybe_fail()
        await asyncio.sleep(0)
        return self.rows.get(email)

    async def insert(self, row: dict) -> dict:
        self._maybe_fail()
        # No await between check and write, so this is atomic on the loop
        if row["email"] in self.rows:
            raise DuplicateEmailError(f"Key (email)=({row['email']}) already exists.")
        self.rows[row["email"]] = dict(row)
        return row

    async def list_all(self) -> list[dict]:
        self._maybe_fail()
        return sorted(
            self.rows.values(),
            key=lambda r: datetime.fromisoformat(r["submitted_at"]),
            reverse=True,
        )

    async def delete_by_email(self, email: str) -> int:
        self._maybe_fail()
        return 1 if self.rows.pop(email, None) is not None else 0


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def store_factory():
    """The in-memory store class, for tests that build their own."""
    return InMemorySubmissionStore


@pytest.fixture
def store():
    """Fresh in-memory store."""
    return InMemorySubmissionStore()


@pytest.fixture
def client(store):
    """TestClient wired to the in-memory store (lifespan not started)."""
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def valid_payload():
    """A submission that passes every check."""
    return {
        "email": "abc@nitj.ac.in",
        "answer": "this is a sufficiently long answer",
    }
