"""Public trip endpoints and trip enrollment."""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from ....core.db import Database, get_db
from ....core.errors import to_http
from ....core.security import get_current_user
from ....schemas.common import Page
from ....schemas.registration import RegistrationResponse, TripEnrollmentCreate
from ....schemas.trip import TripRead
from ....services.registration_service import RegistrationService
from ....services.trip_service import TripService

router = APIRouter()


@router.get("/", response_model=Page[TripRead])
async def list_trips(
    search: Optional[str] = None,
    limit: int = Query(100, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Database = Depends(get_db),
) -> Page[TripRead]:
    items, total = await TripService.list_public(db, search=search, limit=limit, offset=offset)
    return Page[TripRead](items=items, total=total, limit=limit, offset=offset)


@router.get("/{trip_id}", response_model=TripRead)
async def get_trip(trip_id: int = Path(..., description="Trip ID"), db: Database = Depends(get_db)) -> TripRead:
    try:
        item = await TripService.get(db, trip_id, published_only=True)
    except ValueError as e:
        raise to_http(e)
    return TripRead(**item)


@router.post("/{trip_id}/enroll", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
async def enroll_in_trip(
    data: TripEnrollmentCreate,
    trip_id: int = Path(..., description="Trip ID"),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> RegistrationResponse:
    try:
        result = await RegistrationService.enroll_in_trip(db, trip_id, current_user["user_id"], data)
    except ValueError as e:
        raise to_http(e)
    return RegistrationResponse(**result)
