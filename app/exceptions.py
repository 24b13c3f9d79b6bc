# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every handled error is rendered as the same JSON envelope:
#   {"success": false, "message": "<human readable>"}
# Internal details are logged, never returned to the caller.
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class QuizException(Exception):
    """
    Base exception for the quiz API.

    All custom exceptions inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: str = "QUIZ_ERROR",
        status_code: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to the API response envelope."""
        return {
            "success": False,
            "message": self.message,
        }


# =============================================================================
# Input Validation Exceptions
# =============================================================================

class MissingFieldsError(QuizException):
    """Raised when email or answer is absent from the request."""

    def __init__(self):
        super().__init__(
            message="Email and answer are required",
            code="MISSING_FIELDS",
            status_code=400,
        )


class InvalidEmailDomainError(QuizException):
    """Raised when the email is outside the allowed institutional domain."""

    def __init__(self):
        super().__init__(
            message="Please use a valid NITJ email address",
            code="INVALID_EMAIL_DOMAIN",
            status_code=400,
        )


class AnswerTooShortError(QuizException):
    """Raised when the trimmed answer is shorter than the minimum length."""

    def __init__(self, min_length: int):
        super().__init__(
            message=f"Answer must be at least {min_length} characters long",
            code="ANSWER_TOO_SHORT",
            status_code=400,
        )


class InvalidRequestBodyError(QuizException):
    """Raised when the body is not a JSON object of string fields."""

    def __init__(self):
        super().__init__(
            message="Invalid request body",
            code="INVALID_BODY",
            status_code=400,
        )


# =============================================================================
# Submission Exceptions
# =============================================================================

class DuplicateSubmissionError(QuizException):
    """Raised when the email already has a stored submission."""

    def __init__(self):
        super().__init__(
            message="You have already submitted your answer",
            code="DUPLICATE_SUBMISSION",
            status_code=400,
        )


class SubmissionValidationError(QuizException):
    """Raised when the record fails the storage schema."""

    def __init__(self, messages: list[str]):
        super().__init__(
            message=", ".join(messages),
            code="SUBMISSION_INVALID",
            status_code=400,
        )
        self.messages = messages


class SubmissionNotFoundError(QuizException):
    """Raised when deleting an email that has no submission."""

    def __init__(self, email: str):
        super().__init__(
            message="Submission not found",
            code="SUBMISSION_NOT_FOUND",
            status_code=404,
        )
        self.email = email


class StorageOperationError(QuizException):
    """Raised when a storage call fails for an unclassified reason."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="STORAGE_ERROR",
            status_code=500,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def quiz_exception_handler(
    request: Request,
    exc: QuizException
) -> JSONResponse:
    """Convert QuizException to the JSON envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request body parsing errors.

    Malformed JSON and non-string fields are reported as a 400 envelope
    rather than FastAPI's default 422 detail list.
    """
    logger.debug(f"Rejected request body on {request.url.path}: {exc.errors()}")
    return await quiz_exception_handler(request, InvalidRequestBodyError())


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """Render framework HTTP errors (unknown route, bad method) as envelopes."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle unexpected exceptions without leaking internals."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error"},
    )
