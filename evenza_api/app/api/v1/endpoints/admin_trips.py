"""Admin management of trips and their participants."""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from ....core.db import Database, get_db
from ....core.errors import to_http
from ....core.security import require_admin
from ....core.states import EntityStatus, PaymentType
from ....schemas.common import Message, Page
from ....schemas.trip import TripCreate, TripDetail, TripRead, TripUpdate
from ....services.trip_service import TripService
from ....services.registration_service import RegistrationService

router = APIRouter()


@router.get("/", response_model=Page[TripRead])
async def list_trips(
    status_param: Optional[EntityStatus] = Query(None, alias="status"),
    search: Optional[str] = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Database = Depends(get_db),
) -> Page[TripRead]:
    """All trips, published or not, newest first."""
    items, total = await TripService.list_admin(
        db, status=status_param.value if status_param else None, search=search, limit=limit, offset=offset
    )
    return Page[TripRead](items=items, total=total, limit=limit, offset=offset)


@router.post("/", response_model=TripRead, status_code=status.HTTP_201_CREATED)
async def create_trip(
    data: TripCreate,
    current_user: dict = Depends(require_admin),
    db: Database = Depends(get_db),
) -> TripRead:
    return TripRead(**await TripService.create(db, data, current_user))


@router.get("/{trip_id}", response_model=TripDetail)
async def get_trip(trip_id: int = Path(..., description="Trip ID"), db: Database = Depends(get_db)) -> TripDetail:
    try:
        trip = await TripService.get(db, trip_id)
    except ValueError as e:
        raise to_http(e)
    return TripDetail(**trip, participants=await TripService.members(db, trip_id))


@router.put("/{trip_id}", response_model=TripRead)
async def update_trip(
    data: TripUpdate,
    trip_id: int = Path(..., description="Trip ID"),
    current_user: dict = Depends(require_admin),
    db: Database = Depends(get_db),
) -> TripRead:
    try:
        item = await TripService.update(db, trip_id, data, current_user)
    except ValueError as e:
        raise to_http(e)
    return TripRead(**item)


@router.delete("/{trip_id}", response_model=Message)
async def delete_trip(
    trip_id: int = Path(..., description="Trip ID"),
    current_user: dict = Depends(require_admin),
    db: Database = Depends(get_db),
) -> Message:
    try:
        await TripService.delete(db, trip_id, current_user)
    except ValueError as e:
        raise to_http(e)
    return Message(message="Trip deleted successfully")


@router.delete("/{trip_id}/participants/{user_id}", response_model=Message)
async def remove_participant(
    trip_id: int = Path(..., description="Trip ID"),
    user_id: int = Path(..., description="User ID"),
    current_user: dict = Depends(require_admin),
    db: Database = Depends(get_db),
) -> Message:
    """Remove one participant and decrement the enrollment count."""
    try:
        await RegistrationService.remove_member(db, PaymentType.TRIP, trip_id, user_id, current_user)
    except ValueError as e:
        raise to_http(e)
    return Message(message="Participant removed")
