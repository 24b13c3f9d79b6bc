# =============================================================================
# lib/supabase_client.py - Submission Store (Supabase)
# =============================================================================
# This module owns the single process-wide handle to the `submissions` table.
# Unlike a module-level singleton, the store is created by the FastAPI
# lifespan, kept on app.state and injected into route handlers, so its
# lifecycle (connect, one delayed retry, close) and its connectivity state
# are explicit.
#
# Uniqueness of `email` is enforced by the table's UNIQUE constraint.
# PostgREST reports a violation as Postgres error 23505, which is surfaced
# here as DuplicateEmailError.
#
# Usage:
#   store = SubmissionStore(url, key)
#   await store.connect()
#   row = await store.insert(record.to_row())
# =============================================================================

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, AsyncClientOptions, acreate_client

# Set up logging for this module
logger = logging.getLogger(__name__)

# Postgres SQLSTATE codes returned by PostgREST
UNIQUE_VIOLATION = "23505"
CHECK_VIOLATION = "23514"
NOT_NULL_VIOLATION = "23502"

# Column list exposed by listings; the surrogate `id` stays internal
PUBLIC_COLUMNS = "email, answer, submitted_at, ip_address"

# Friendly messages for the CHECK constraints in sql/001_create_submissions.sql
CONSTRAINT_MESSAGES = {
    "submissions_email_format": "Invalid NITJ email format",
    "submissions_answer_length": "Answer must be between 10 and 2000 characters",
}


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    The message is meant for logs; API handlers never return it verbatim.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class DuplicateEmailError(SupabaseClientError):
    """The UNIQUE constraint on email rejected an insert."""

    def __init__(self, detail: str):
        super().__init__(
            message=f"Unique constraint violated: {detail}",
            code="DUPLICATE_EMAIL",
        )


class SchemaViolationError(SupabaseClientError):
    """A CHECK or NOT NULL constraint rejected a row."""

    def __init__(self, messages: list[str], raw: str):
        super().__init__(
            message=raw,
            code="SCHEMA_VIOLATION",
            details={"messages": messages},
        )
        self.messages = messages


class SubmissionStore:
    """
    Async handle to the submissions table.

    One instance is shared by all requests. The underlying AsyncClient
    issues HTTP calls through httpx, so concurrent requests interleave at
    every awaited operation; Postgres serializes conflicting writes.

    Example:
        store = SubmissionStore(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)
        if not await store.connect():
            asyncio.create_task(store.retry_connect(5.0))
        store.connected  # feeds /api/health
    """

    def __init__(
        self,
        url: str,
        key: str,
        table: str = "submissions",
        connect_timeout: float = 10.0,
        socket_timeout: float = 45.0,
        client: AsyncClient | None = None,
    ):
        self.url = url
        self.table = table
        self._key = key
        self._timeout = httpx.Timeout(socket_timeout, connect=connect_timeout)
        self._client = client
        self._connected = False

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @property
    def connected(self) -> bool:
        """Whether the last storage round-trip reached the database."""
        return self._connected

    def _set_connected(self, value: bool) -> None:
        if value == self._connected:
            return
        self._connected = value
        if value:
            logger.info(f"Connected to storage table '{self.table}'")
        else:
            logger.warning("Storage connection lost")

    async def _get_client(self) -> AsyncClient:
        if self._client is None:
            try:
                self._client = await acreate_client(
                    self.url,
                    self._key,
                    options=AsyncClientOptions(postgrest_client_timeout=self._timeout),
                )
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                ) from e
            logger.debug("Supabase async client created")
        return self._client

    async def connect(self) -> bool:
        """
        Create the client and probe the table once.

        Never raises: a failed probe is logged and reported as False so the
        server can start anyway and report itself unhealthy.
        """
        logger.info("Connecting to storage...")
        try:
            await self.ping()
        except SupabaseClientError as e:
            self._set_connected(False)
            logger.error(f"Storage connection error: {e}")
            return False
        self._set_connected(True)
        return True

    async def retry_connect(self, delay: float) -> bool:
        """Wait `delay` seconds, then try connect() exactly once more."""
        await asyncio.sleep(delay)
        logger.info("Retrying storage connection...")
        return await self.connect()

    async def close(self) -> None:
        """Release the HTTP sessions held by the client."""
        if self._client is None:
            return
        try:
            await self._client.postgrest.aclose()
        except Exception as e:
            logger.warning(f"Error while closing storage client: {e}")
        finally:
            self._client = None
            self._connected = False
        logger.info("Storage connection closed")

    # -------------------------------------------------------------------------
    # Query Execution
    # -------------------------------------------------------------------------

    async def _execute(self, query: Any, operation: str) -> Any:
        """
        Await a PostgREST query, translating failures.

        Transport failures flip the store to disconnected; any completed
        round-trip (success or database error) means storage is reachable.
        """
        try:
            response = await query.execute()
        except APIError as e:
            self._set_connected(True)
            raise self._translate_api_error(e, operation) from e
        except httpx.TransportError as e:
            self._set_connected(False)
            raise SupabaseClientError(
                message=f"Storage unreachable during {operation}: {e}",
                code="CONNECTION_FAILED",
            ) from e
        self._set_connected(True)
        return response

    def _translate_api_error(self, error: APIError, operation: str) -> SupabaseClientError:
        raw = error.message or str(error)
        if error.code == UNIQUE_VIOLATION:
            return DuplicateEmailError(detail=error.details or raw)
        if error.code in (CHECK_VIOLATION, NOT_NULL_VIOLATION):
            messages = [
                message
                for constraint, message in CONSTRAINT_MESSAGES.items()
                if constraint in raw
            ]
            return SchemaViolationError(messages or ["Submission failed validation"], raw)
        return SupabaseClientError(
            message=f"{operation} failed: {raw}",
            code=f"{operation.upper()}_FAILED",
            details={"postgres_code": error.code},
        )

    # -------------------------------------------------------------------------
    # Submission Operations
    # -------------------------------------------------------------------------

    async def ping(self) -> None:
        """Cheapest round-trip that proves the table is reachable."""
        client = await self._get_client()
        await self._execute(
            client.table(self.table).select("email").limit(1),
            "ping",
        )

    async def find_by_email(self, email: str) -> dict[str, Any] | None:
        """
        Fetch the submission for a normalized email.

        Returns:
            Row dict (public columns), or None if absent
        """
        client = await self._get_client()
        response = await self._execute(
            client.table(self.table)
            .select(PUBLIC_COLUMNS)
            .eq("email", email)
            .limit(1),
            "find",
        )
        rows = response.data or []
        return rows[0] if rows else None

    async def insert(self, row: dict[str, Any]) -> dict[str, Any]:
        """
        Insert one submission row.

        Raises:
            DuplicateEmailError: If the email already has a row
            SchemaViolationError: If a CHECK / NOT NULL constraint fails
            SupabaseClientError: For any other failure
        """
        client = await self._get_client()
        response = await self._execute(
            client.table(self.table).insert(row),
            "insert",
        )

        if not response.data:
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_FAILED",
            )
        return response.data[0]

    async def list_all(self) -> list[dict[str, Any]]:
        """All submissions, newest first."""
        client = await self._get_client()
        response = await self._execute(
            client.table(self.table)
            .select(PUBLIC_COLUMNS)
            .order("submitted_at", desc=True),
            "list",
        )
        return response.data or []

    async def delete_by_email(self, email: str) -> int:
        """
        Delete the submission for a normalized email.

        Returns:
            Number of rows deleted (0 or 1)
        """
        client = await self._get_client()
        response = await self._execute(
            client.table(self.table).delete().eq("email", email),
            "delete",
        )
        return len(response.data or [])
