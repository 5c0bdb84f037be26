"""Admin management of events and their attendees."""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from ....core.db import Database, get_db
from ....core.errors import to_http
from ....core.security import require_admin
from ....core.states import EntityStatus, PaymentType
from ....schemas.common import Message, Page
from ....schemas.event import EventCreate, EventDetail, EventRead, EventUpdate
from ....services.event_service import EventService
from ....services.registration_service import RegistrationService

router = APIRouter()


@router.get("/", response_model=Page[EventRead])
async def list_events(
    status_param: Optional[EntityStatus] = Query(None, alias="status"),
    search: Optional[str] = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Database = Depends(get_db),
) -> Page[EventRead]:
    """All events, published or not, newest first."""
    items, total = await EventService.list_admin(
        db, status=status_param.value if status_param else None, search=search, limit=limit, offset=offset
    )
    return Page[EventRead](items=items, total=total, limit=limit, offset=offset)


@router.post("/", response_model=EventRead, status_code=status.HTTP_201_CREATED)
async def create_event(
    data: EventCreate,
    current_user: dict = Depends(require_admin),
    db: Database = Depends(get_db),
) -> EventRead:
    return EventRead(**await EventService.create(db, data, current_user))


@router.get("/{event_id}", response_model=EventDetail)
async def get_event(event_id: int = Path(..., description="Event ID"), db: Database = Depends(get_db)) -> EventDetail:
    try:
        event = await EventService.get(db, event_id)
    except ValueError as e:
        raise to_http(e)
    return EventDetail(**event, attendees=await EventService.members(db, event_id))


@router.put("/{event_id}", response_model=EventRead)
async def update_event(
    data: EventUpdate,
    event_id: int = Path(..., description="Event ID"),
    current_user: dict = Depends(require_admin),
    db: Database = Depends(get_db),
) -> EventRead:
    try:
        item = await EventService.update(db, event_id, data, current_user)
    except ValueError as e:
        raise to_http(e)
    return EventRead(**item)


@router.delete("/{event_id}", response_model=Message)
async def delete_event(
    event_id: int = Path(..., description="Event ID"),
    current_user: dict = Depends(require_admin),
    db: Database = Depends(get_db),
) -> Message:
    try:
        await EventService.delete(db, event_id, current_user)
    except ValueError as e:
        raise to_http(e)
    return Message(message="Event deleted successfully")


@router.delete("/{event_id}/attendees/{user_id}", response_model=Message)
async def remove_attendee(
    event_id: int = Path(..., description="Event ID"),
    user_id: int = Path(..., description="User ID"),
    current_user: dict = Depends(require_admin),
    db: Database = Depends(get_db),
) -> Message:
    """Remove one attendee and decrement the attendee count."""
    try:
        await RegistrationService.remove_member(db, PaymentType.EVENT, event_id, user_id, current_user)
    except ValueError as e:
        raise to_http(e)
    return Message(message="Attendee removed")
