# =============================================================================
# app/routers/submissions.py - Submission Endpoints
# =============================================================================
# Participant endpoint:
#   POST   /submit                       - submit one answer per email
# Admin endpoints (no authentication, known gap):
#   GET    /admin/submissions            - list all, newest first
#   DELETE /admin/submissions/{email}    - delete one by email
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path

from app.dependencies import ClientIPDep, SubmissionServiceDep
from core.models.submission import (
    MessageResponse,
    SubmissionList,
    SubmitRequest,
    SubmitResponse,
)

router = APIRouter()


@router.post("/submit", response_model=SubmitResponse, tags=["Submissions"])
async def submit_answer(
    service: SubmissionServiceDep,
    client_ip: ClientIPDep,
    body: SubmitRequest | None = None,
):
    """
    Submit a quiz answer.

    Only @nitj.ac.in addresses are accepted, once per address.
    The answer must be 10-2000 characters after trimming.
    """
    body = body or SubmitRequest()
    record = await service.submit(body.email, body.answer, ip_address=client_ip)

    return SubmitResponse(
        message="Submission successful! Thank you for participating.",
        submitted_at=record.submitted_at,
    )


@router.get("/admin/submissions", response_model=SubmissionList, tags=["Admin"])
async def list_submissions(service: SubmissionServiceDep):
    """
    List every submission, newest first, with a total count.
    """
    submissions = await service.list_submissions()

    return SubmissionList(count=len(submissions), submissions=submissions)


@router.delete(
    "/admin/submissions/{email}",
    response_model=MessageResponse,
    tags=["Admin"],
)
async def delete_submission(
    email: Annotated[str, Path(description="Submitter email (case-insensitive)")],
    service: SubmissionServiceDep,
):
    """
    Delete the submission for an email.

    Returns 404 when no submission matches.
    """
    await service.delete_submission(email)

    return MessageResponse(message="Submission deleted successfully")
