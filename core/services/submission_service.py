# =============================================================================
# core/services/submission_service.py - Submission Business Logic
# =============================================================================
# Handles the submit / list / delete flows and maps storage failures onto
# API exceptions. Separates HTTP concerns from database logic.
#
# Validation order for a new submission (first failure wins):
#   1. email and answer present (blank strings fall through to 2 and 3)
#   2. email ends with @nitj.ac.in (after trim + lower-case)
#   3. trimmed answer is at least 10 characters
#   4. no existing submission for the email
# The record schema and the table constraints then re-check everything.
# =============================================================================

import logging

from pydantic import ValidationError

from lib.supabase_client import (
    DuplicateEmailError,
    SchemaViolationError,
    SubmissionStore,
    SupabaseClientError,
)
from core.models.submission import (
    ANSWER_MIN_LENGTH,
    EMAIL_SUFFIX,
    SubmissionOut,
    SubmissionRecord,
    normalize_email,
)
from app.exceptions import (
    AnswerTooShortError,
    DuplicateSubmissionError,
    InvalidEmailDomainError,
    MissingFieldsError,
    StorageOperationError,
    SubmissionNotFoundError,
    SubmissionValidationError,
)

logger = logging.getLogger(__name__)


class SubmissionService:
    """
    Service for quiz submission operations.

    Holds no state besides the store handle it was given.
    """

    def __init__(self, store: SubmissionStore):
        self.store = store

    async def submit(
        self,
        email: str | None,
        answer: str | None,
        ip_address: str | None = None,
    ) -> SubmissionRecord:
        """
        Validate and persist a new submission.

        Args:
            email: Raw email from the request body
            answer: Raw answer from the request body
            ip_address: Originating client address, if known

        Returns:
            The stored SubmissionRecord

        Raises:
            MissingFieldsError, InvalidEmailDomainError, AnswerTooShortError:
                API-level validation failures
            DuplicateSubmissionError: Email already submitted (pre-check or
                UNIQUE constraint)
            SubmissionValidationError: Record rejected by the storage schema
            StorageOperationError: Any other storage failure
        """
        if not email or not answer:
            raise MissingFieldsError()

        normalized = normalize_email(email)
        if not normalized.endswith(EMAIL_SUFFIX):
            raise InvalidEmailDomainError()

        if len(answer.strip()) < ANSWER_MIN_LENGTH:
            raise AnswerTooShortError(ANSWER_MIN_LENGTH)

        try:
            if await self.store.find_by_email(normalized):
                raise DuplicateSubmissionError()

            record = SubmissionRecord(
                email=normalized,
                answer=answer,
                ip_address=ip_address,
            )
            await self.store.insert(record.to_row())

        except DuplicateEmailError:
            # Lost the race against a concurrent insert of the same email
            logger.info(f"Duplicate submission rejected by storage: {normalized}")
            raise DuplicateSubmissionError()
        except ValidationError as e:
            raise SubmissionValidationError([err["msg"] for err in e.errors()])
        except SchemaViolationError as e:
            logger.error(f"Storage constraint rejected submission: {e}")
            raise SubmissionValidationError(e.messages)
        except SupabaseClientError as e:
            logger.exception(f"Error during submission: {e}")
            raise StorageOperationError("Server error. Please try again later.")

        logger.info(f"New submission from: {normalized}")
        return record

    async def list_submissions(self) -> list[SubmissionOut]:
        """All submissions, newest first. No pagination."""
        try:
            rows = await self.store.list_all()
        except SupabaseClientError as e:
            logger.exception(f"Error fetching submissions: {e}")
            raise StorageOperationError("Error fetching submissions")

        return [SubmissionOut.model_validate(row) for row in rows]

    async def delete_submission(self, email: str) -> None:
        """
        Delete the submission for an email (normalized before lookup).

        Raises:
            SubmissionNotFoundError: If nothing matched
            StorageOperationError: If the delete failed
        """
        normalized = normalize_email(email)
        try:
            deleted = await self.store.delete_by_email(normalized)
        except SupabaseClientError as e:
            logger.exception(f"Error deleting submission: {e}")
            raise StorageOperationError("Error deleting submission")

        if deleted == 0:
            raise SubmissionNotFoundError(normalized)

        logger.info(f"Deleted submission for: {normalized}")
