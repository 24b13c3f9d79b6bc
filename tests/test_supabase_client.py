# =============================================================================
# tests/test_supabase_client.py - Submission Store Tests
# =============================================================================
# This module contains tests for:
# - Query construction for find / insert / list / delete
# - Translation of PostgREST errors (23505, 23514) and transport failures
# - Connectivity state and the single delayed retry
#
# Tests use a mocked AsyncClient to avoid network calls.
# =============================================================================

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from postgrest.exceptions import APIError

from lib.supabase_client import (
    PUBLIC_COLUMNS,
    DuplicateEmailError,
    SchemaViolationError,
    SubmissionStore,
    SupabaseClientError,
)


def _response(data):
    response = MagicMock()
    response.data = data
    return response


def _api_error(code: str, message: str, details: str | None = None) -> APIError:
    return APIError({"message": message, "code": code, "details": details, "hint": None})


@pytest.fixture
def mock_client():
    """AsyncClient stand-in; table() returns the same builder every call."""
    client = MagicMock()
    client.postgrest.aclose = AsyncMock()
    return client


@pytest.fixture
def builder(mock_client):
    return mock_client.table.return_value


@pytest.fixture
def supabase_store(mock_client):
    return SubmissionStore("https://test-project.supabase.co", "key", client=mock_client)


# =============================================================================
# Queries
# =============================================================================

class TestQueries:
    """Query construction and result handling."""

    @pytest.mark.asyncio
    async def test_find_by_email_returns_first_row(self, supabase_store, mock_client, builder):
        row = {"email": "a@nitj.ac.in"}
        query = builder.select.return_value.eq.return_value.limit.return_value
        query.execute = AsyncMock(return_value=_response([row]))

        result = await supabase_store.find_by_email("a@nitj.ac.in")

        assert result == row
        mock_client.table.assert_called_with("submissions")
        builder.select.assert_called_with(PUBLIC_COLUMNS)
        builder.select.return_value.eq.assert_called_with("email", "a@nitj.ac.in")

    @pytest.mark.asyncio
    async def test_find_by_email_missing(self, supabase_store, builder):
        query = builder.select.return_value.eq.return_value.limit.return_value
        query.execute = AsyncMock(return_value=_response([]))

        assert await supabase_store.find_by_email("a@nitj.ac.in") is None

    @pytest.mark.asyncio
    async def test_insert_returns_stored_row(self, supabase_store, builder):
        row = {"email": "a@nitj.ac.in", "answer": "long enough answer"}
        builder.insert.return_value.execute = AsyncMock(return_value=_response([row]))

        assert await supabase_store.insert(row) == row
        builder.insert.assert_called_with(row)

    @pytest.mark.asyncio
    async def test_insert_without_data_is_an_error(self, supabase_store, builder):
        builder.insert.return_value.execute = AsyncMock(return_value=_response([]))

        with pytest.raises(SupabaseClientError) as exc_info:
            await supabase_store.insert({"email": "a@nitj.ac.in"})

        assert exc_info.value.code == "INSERT_FAILED"

    @pytest.mark.asyncio
    async def test_list_all_orders_newest_first(self, supabase_store, builder):
        rows = [{"email": "b@nitj.ac.in"}, {"email": "a@nitj.ac.in"}]
        builder.select.return_value.order.return_value.execute = AsyncMock(
            return_value=_response(rows)
        )

        assert await supabase_store.list_all() == rows
        builder.select.return_value.order.assert_called_with("submitted_at", desc=True)

    @pytest.mark.asyncio
    async def test_delete_counts_returned_rows(self, supabase_store, builder):
        query = builder.delete.return_value.eq.return_value
        query.execute = AsyncMock(return_value=_response([{"email": "a@nitj.ac.in"}]))

        assert await supabase_store.delete_by_email("a@nitj.ac.in") == 1

        query.execute = AsyncMock(return_value=_response([]))
        assert await supabase_store.delete_by_email("a@nitj.ac.in") == 0

    @pytest.mark.asyncio
    async def test_custom_table_name(self, mock_client):
        store = SubmissionStore("https://x.supabase.co", "key", table="quiz_2024", client=mock_client)
        mock_client.table.return_value.select.return_value.order.return_value.execute = AsyncMock(
            return_value=_response([])
        )

        await store.list_all()

        mock_client.table.assert_called_with("quiz_2024")


# =============================================================================
# Error Translation
# =============================================================================

class TestErrors:
    """PostgREST and transport errors become store errors."""

    @pytest.mark.asyncio
    async def test_unique_violation(self, supabase_store, builder):
        builder.insert.return_value.execute = AsyncMock(side_effect=_api_error(
            "23505",
            'duplicate key value violates unique constraint "submissions_email_key"',
            "Key (email)=(a@nitj.ac.in) already exists.",
        ))

        with pytest.raises(DuplicateEmailError):
            await supabase_store.insert({"email": "a@nitj.ac.in"})

    @pytest.mark.asyncio
    async def test_check_violation_maps_constraint_message(self, supabase_store, builder):
        builder.insert.return_value.execute = AsyncMock(side_effect=_api_error(
            "23514",
            'new row for relation "submissions" violates check constraint "submissions_answer_length"',
        ))

        with pytest.raises(SchemaViolationError) as exc_info:
            await supabase_store.insert({"email": "a@nitj.ac.in"})

        assert exc_info.value.messages == ["Answer must be between 10 and 2000 characters"]

    @pytest.mark.asyncio
    async def test_other_api_errors_are_generic(self, supabase_store, builder):
        builder.select.return_value.order.return_value.execute = AsyncMock(
            side_effect=_api_error("42P01", 'relation "public.submissions" does not exist')
        )

        with pytest.raises(SupabaseClientError) as exc_info:
            await supabase_store.list_all()

        assert not isinstance(exc_info.value, DuplicateEmailError)
        assert exc_info.value.code == "LIST_FAILED"
        assert exc_info.value.details == {"postgres_code": "42P01"}

    @pytest.mark.asyncio
    async def test_transport_error_marks_disconnected(self, supabase_store, builder):
        ping = builder.select.return_value.limit.return_value
        ping.execute = AsyncMock(return_value=_response([]))
        await supabase_store.connect()
        assert supabase_store.connected is True

        builder.select.return_value.order.return_value.execute = AsyncMock(
            side_effect=httpx.ConnectError("connection refused")
        )

        with pytest.raises(SupabaseClientError) as exc_info:
            await supabase_store.list_all()

        assert exc_info.value.code == "CONNECTION_FAILED"
        assert supabase_store.connected is False


# =============================================================================
# Lifecycle
# =============================================================================

class TestLifecycle:
    """connect / retry_connect / close."""

    @pytest.mark.asyncio
    async def test_starts_disconnected(self, supabase_store):
        assert supabase_store.connected is False

    @pytest.mark.asyncio
    async def test_connect_success(self, supabase_store, builder):
        builder.select.return_value.limit.return_value.execute = AsyncMock(
            return_value=_response([])
        )

        assert await supabase_store.connect() is True
        assert supabase_store.connected is True

    @pytest.mark.asyncio
    async def test_connect_failure_does_not_raise(self, supabase_store, builder):
        builder.select.return_value.limit.return_value.execute = AsyncMock(
            side_effect=httpx.ConnectTimeout("timed out")
        )

        assert await supabase_store.connect() is False
        assert supabase_store.connected is False

    @pytest.mark.asyncio
    async def test_connect_fails_when_table_missing(self, supabase_store, builder):
        builder.select.return_value.limit.return_value.execute = AsyncMock(
            side_effect=_api_error("42P01", "relation does not exist")
        )

        assert await supabase_store.connect() is False
        assert supabase_store.connected is False

    @pytest.mark.asyncio
    async def test_client_creation_failure(self):
        store = SubmissionStore("not-a-url", "key")

        with patch("lib.supabase_client.acreate_client", AsyncMock(side_effect=ValueError("Invalid URL"))):
            assert await store.connect() is False

    @pytest.mark.asyncio
    async def test_retry_connect_waits_then_probes_once(self, supabase_store):
        with patch("lib.supabase_client.asyncio.sleep", AsyncMock()) as sleep, \
                patch.object(supabase_store, "ping", AsyncMock()) as ping:
            assert await supabase_store.retry_connect(5.0) is True

        sleep.assert_awaited_once_with(5.0)
        ping.assert_awaited_once()
        assert supabase_store.connected is True

    @pytest.mark.asyncio
    async def test_close_releases_client(self, supabase_store, mock_client):
        await supabase_store.close()

        mock_client.postgrest.aclose.assert_awaited_once()
        assert supabase_store.connected is False

    @pytest.mark.asyncio
    async def test_close_without_client_is_noop(self):
        store = SubmissionStore("https://x.supabase.co", "key")

        await store.close()
