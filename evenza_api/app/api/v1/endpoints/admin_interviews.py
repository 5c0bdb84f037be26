"""Admin management of interviews and their applicants."""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from ....core.db import Database, get_db
from ....core.errors import to_http
from ....core.security import require_admin
from ....core.states import InterviewState, PaymentType
from ....schemas.common import Message, Page
from ....schemas.interview import InterviewCreate, InterviewDetail, InterviewRead, InterviewUpdate
from ....services.interview_service import InterviewService
from ....services.registration_service import RegistrationService

router = APIRouter()


@router.get("/", response_model=Page[InterviewRead])
async def list_interviews(
    status_param: Optional[InterviewState] = Query(None, alias="status"),
    search: Optional[str] = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Database = Depends(get_db),
) -> Page[InterviewRead]:
    items, total = await InterviewService.list_admin(
        db, status=status_param.value if status_param else None, search=search, limit=limit, offset=offset
    )
    return Page[InterviewRead](items=items, total=total, limit=limit, offset=offset)


@router.post("/", response_model=InterviewRead, status_code=status.HTTP_201_CREATED)
async def create_interview(
    data: InterviewCreate,
    current_user: dict = Depends(require_admin),
    db: Database = Depends(get_db),
) -> InterviewRead:
    return InterviewRead(**await InterviewService.create(db, data, current_user))


@router.get("/{interview_id}", response_model=InterviewDetail)
async def get_interview(
    interview_id: int = Path(..., description="Interview ID"), db: Database = Depends(get_db)
) -> InterviewDetail:
    """An interview with every application it received."""
    try:
        interview = await InterviewService.get(db, interview_id)
    except ValueError as e:
        raise to_http(e)
    submissions, _ = await InterviewService.list_submissions(db, interview_id=interview_id, limit=1000)
    return InterviewDetail(**interview, submissions=submissions)


@router.put("/{interview_id}", response_model=InterviewRead)
async def update_interview(
    data: InterviewUpdate,
    interview_id: int = Path(..., description="Interview ID"),
    current_user: dict = Depends(require_admin),
    db: Database = Depends(get_db),
) -> InterviewRead:
    try:
        item = await InterviewService.update(db, interview_id, data, current_user)
    except ValueError as e:
        raise to_http(e)
    return InterviewRead(**item)


@router.delete("/{interview_id}", response_model=Message)
async def delete_interview(
    interview_id: int = Path(..., description="Interview ID"),
    current_user: dict = Depends(require_admin),
    db: Database = Depends(get_db),
) -> Message:
    try:
        await InterviewService.delete(db, interview_id, current_user)
    except ValueError as e:
        raise to_http(e)
    return Message(message="Interview deleted successfully")


@router.delete("/{interview_id}/applicants/{user_id}", response_model=Message)
async def remove_applicant(
    interview_id: int = Path(..., description="Interview ID"),
    user_id: int = Path(..., description="User ID"),
    current_user: dict = Depends(require_admin),
    db: Database = Depends(get_db),
) -> Message:
    try:
        await RegistrationService.remove_member(db, PaymentType.INTERVIEW, interview_id, user_id, current_user)
    except ValueError as e:
        raise to_http(e)
    return Message(message="Applicant removed")
