"""
Self-service endpoints for the signed-in user.

Every route acts on the caller only; the user id always comes from the
access token, never from the request.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query

from ....core.db import Database, get_db
from ....core.errors import to_http
from ....core.security import get_current_user
from ....core.states import PaymentType
from ....schemas.activity import ActivityRead
from ....schemas.common import Message, Page
from ....schemas.dashboard import UserDashboard
from ....schemas.interview import InterviewSubmissionRead
from ....schemas.payment import PaymentProof, PaymentRead
from ....schemas.registration import RegistrationRead
from ....schemas.user import PasswordChange, ProfileUpdate, UserRead
from ....services.activity_service import ActivityService
from ....services.dashboard_service import DashboardService
from ....services.interview_service import InterviewService
from ....services.payment_service import PaymentService
from ....services.registration_service import RegistrationService
from ....services.user_service import UserService

router = APIRouter()


@router.get("/profile", response_model=UserRead)
async def get_profile(current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)) -> UserRead:
    try:
        item = await UserService.get_user(db, current_user["user_id"])
    except ValueError as e:
        raise to_http(e)
    return UserRead(**item)


@router.put("/profile", response_model=UserRead)
async def update_profile(
    data: ProfileUpdate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> UserRead:
    try:
        item = await UserService.update_profile(db, current_user["user_id"], data)
    except ValueError as e:
        raise to_http(e)
    return UserRead(**item)


@router.post("/change-password", response_model=Message)
async def change_password(
    data: PasswordChange,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> Message:
    try:
        await UserService.change_password(db, current_user["user_id"], data.current_password, data.new_password)
    except ValueError as e:
        raise to_http(e)
    return Message(message="Password updated successfully")


@router.get("/dashboard", response_model=UserDashboard)
async def dashboard(current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)) -> UserDashboard:
    """Profile, counters, registrations and a few items still open to join."""
    try:
        item = await DashboardService.user_dashboard(db, current_user["user_id"])
    except ValueError as e:
        raise to_http(e)
    return UserDashboard(**item)


@router.get("/registrations", response_model=List[RegistrationRead])
async def list_registrations(
    kind: Optional[PaymentType] = None,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> List[RegistrationRead]:
    rows = await RegistrationService.list_for_user(db, current_user["user_id"], kind.value if kind else None)
    return [RegistrationRead(**row) for row in rows]


@router.get("/interview-submissions", response_model=Page[InterviewSubmissionRead])
async def list_submissions(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> Page[InterviewSubmissionRead]:
    items, total = await InterviewService.list_submissions(
        db, user_id=current_user["user_id"], limit=limit, offset=offset
    )
    return Page[InterviewSubmissionRead](items=items, total=total, limit=limit, offset=offset)


@router.get("/payments", response_model=Page[PaymentRead])
async def list_payments(
    status_param: Optional[str] = Query(None, alias="status"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> Page[PaymentRead]:
    try:
        items, total = await PaymentService.list_payments(
            db, user_id=current_user["user_id"], status=status_param, limit=limit, offset=offset
        )
    except ValueError as e:
        raise to_http(e)
    return Page[PaymentRead](items=items, total=total, limit=limit, offset=offset)


@router.put("/payments/{payment_id}/proof", response_model=PaymentRead)
async def submit_payment_proof(
    data: PaymentProof,
    payment_id: int = Path(..., description="Payment ID"),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> PaymentRead:
    """Attach a proof of transfer to one of the caller's pending payments."""
    try:
        payment = await PaymentService.submit_proof(
            db, payment_id, current_user["user_id"], data.proof_url, data.notes
        )
    except ValueError as e:
        raise to_http(e)
    return PaymentRead(**payment)


@router.get("/activity", response_model=Page[ActivityRead])
async def list_activity(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> Page[ActivityRead]:
    items, total = await ActivityService.list_activity(
        db, user_id=current_user["user_id"], limit=limit, offset=offset
    )
    return Page[ActivityRead](items=items, total=total, limit=limit, offset=offset)
