# =============================================================================
# core/models/submission.py - Submission Schemas
# =============================================================================
# These models define the contract for quiz submissions:
# - SubmitRequest: Raw body of POST /submit (fields optional so the API
#   layer can report missing values with its own message)
# - SubmissionRecord: The storage schema, validated right before insert
# - SubmissionOut: One item of the admin listing
#
# JSON output uses camelCase (submittedAt, ipAddress); database columns
# use snake_case (submitted_at, ip_address).
# =============================================================================

import re
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

ANSWER_MIN_LENGTH = 10
ANSWER_MAX_LENGTH = 2000

EMAIL_DOMAIN = "nitj.ac.in"
EMAIL_SUFFIX = f"@{EMAIL_DOMAIN}"

# Storage-level email format; the API layer only checks the domain suffix
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@" + re.escape(EMAIL_DOMAIN) + r"$")


def normalize_email(email: str) -> str:
    """Trim and lower-case an email; this is the uniqueness key."""
    return email.strip().lower()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SubmitRequest(BaseModel):
    """
    Body of POST /submit.

    Example:
        {
            "email": "abc@nitj.ac.in",
            "answer": "this is a sufficiently long answer"
        }
    """

    email: str | None = Field(default=None, examples=["abc@nitj.ac.in"])
    answer: str | None = Field(
        default=None,
        examples=["this is a sufficiently long answer"],
    )


class SubmissionRecord(BaseModel):
    """
    A submission as persisted in the `submissions` table.

    Validation here mirrors the table's CHECK constraints, so a record that
    slips past the API pre-checks is still rejected before it reaches the
    database. All field errors are collected, not just the first.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    email: str
    answer: str
    submitted_at: datetime = Field(default_factory=_utcnow)
    ip_address: str | None = None

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        value = normalize_email(value)
        if not value:
            raise PydanticCustomError("email_required", "Email is required")
        if not EMAIL_PATTERN.match(value):
            raise PydanticCustomError("email_format", "Invalid NITJ email format")
        return value

    @field_validator("answer")
    @classmethod
    def _check_answer(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise PydanticCustomError("answer_required", "Answer is required")
        if len(value) < ANSWER_MIN_LENGTH:
            raise PydanticCustomError(
                "answer_too_short",
                "Answer must be at least {min_length} characters long",
                {"min_length": ANSWER_MIN_LENGTH},
            )
        if len(value) > ANSWER_MAX_LENGTH:
            raise PydanticCustomError(
                "answer_too_long",
                "Answer cannot exceed {max_length} characters",
                {"max_length": ANSWER_MAX_LENGTH},
            )
        return value

    def to_row(self) -> dict:
        """Column dict for insert (snake_case, JSON-safe)."""
        return self.model_dump(mode="json")


class SubmissionOut(BaseModel):
    """
    One submission as returned by GET /admin/submissions.

    Built from database rows without re-running the storage validators.
    Internal columns (the surrogate id) are never part of this model.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    email: str
    answer: str
    submitted_at: datetime
    ip_address: str | None = None


class SubmitResponse(BaseModel):
    """Success envelope for POST /submit."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    message: str
    submitted_at: datetime


class SubmissionList(BaseModel):
    """Success envelope for GET /admin/submissions. No pagination."""

    success: bool = True
    count: int = Field(default=0, ge=0)
    submissions: list[SubmissionOut] = Field(default_factory=list)


class MessageResponse(BaseModel):
    """Plain success envelope."""

    success: bool = True
    message: str
