"""Public interview listings and applications."""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from ....core.db import Database, get_db
from ....core.errors import to_http
from ....core.security import get_current_user
from ....schemas.common import Page
from ....schemas.interview import InterviewRead, InterviewSubmissionCreate
from ....schemas.registration import RegistrationResponse
from ....services.interview_service import InterviewService
from ....services.registration_service import RegistrationService

router = APIRouter()


@router.get("/", response_model=Page[InterviewRead])
async def list_interviews(
    search: Optional[str] = None,
    limit: int = Query(100, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Database = Depends(get_db),
) -> Page[InterviewRead]:
    items, total = await InterviewService.list_public(db, search=search, limit=limit, offset=offset)
    return Page[InterviewRead](items=items, total=total, limit=limit, offset=offset)


@router.get("/{interview_id}", response_model=InterviewRead)
async def get_interview(
    interview_id: int = Path(..., description="Interview ID"), db: Database = Depends(get_db)
) -> InterviewRead:
    try:
        item = await InterviewService.get(db, interview_id, published_only=True)
    except ValueError as e:
        raise to_http(e)
    return InterviewRead(**item)


@router.post("/{interview_id}/submit", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
async def apply_for_interview(
    data: InterviewSubmissionCreate,
    interview_id: int = Path(..., description="Interview ID"),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> RegistrationResponse:
    """Submit an application.  Each user may apply once per interview."""
    try:
        result = await RegistrationService.apply_for_interview(db, interview_id, current_user["user_id"], data)
    except ValueError as e:
        raise to_http(e)
    return RegistrationResponse(**result)
