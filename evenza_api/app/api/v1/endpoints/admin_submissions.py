"""Admin review of interview applications."""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from ....core.db import Database, get_db
from ....core.errors import to_http
from ....core.security import require_admin
from ....schemas.common import Page
from ....schemas.interview import InterviewSubmissionRead, SubmissionReview
from ....services.interview_service import InterviewService

router = APIRouter()


@router.get("/", response_model=Page[InterviewSubmissionRead])
async def list_submissions(
    interview_id: Optional[int] = None,
    status_param: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Database = Depends(get_db),
) -> Page[InterviewSubmissionRead]:
    try:
        items, total = await InterviewService.list_submissions(
            db, interview_id=interview_id, status=status_param, search=search, limit=limit, offset=offset
        )
    except ValueError as e:
        raise to_http(e)
    return Page[InterviewSubmissionRead](items=items, total=total, limit=limit, offset=offset)


@router.get("/{submission_id}", response_model=InterviewSubmissionRead)
async def get_submission(
    submission_id: int = Path(..., description="Submission ID"), db: Database = Depends(get_db)
) -> InterviewSubmissionRead:
    try:
        item = await InterviewService.get_submission(db, submission_id)
    except ValueError as e:
        raise to_http(e)
    return InterviewSubmissionRead(**item)


@router.put("/{submission_id}", response_model=InterviewSubmissionRead)
async def review_submission(
    data: SubmissionReview,
    submission_id: int = Path(..., description="Submission ID"),
    current_user: dict = Depends(require_admin),
    db: Database = Depends(get_db),
) -> InterviewSubmissionRead:
    """Change the application status and notes.

    The status must be reachable from the current one (for example a
    completed application cannot be reopened); the applicant is
    emailed when the status changes.
    """
    try:
        submission = await InterviewService.review_submission(
            db, submission_id, data.status, current_user, data.admin_notes
        )
    except ValueError as e:
        raise to_http(e)
    return InterviewSubmissionRead(**submission)
