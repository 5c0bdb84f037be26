"""
Public event endpoints for API v1.

Listing and detail are open to everyone and only show published
events.  Registration requires authentication.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from ....core.db import Database, get_db
from ....core.errors import to_http
from ....core.security import get_current_user
from ....schemas.common import Page
from ....schemas.event import EventRead
from ....schemas.registration import EventRegistrationCreate, RegistrationResponse
from ....services.event_service import EventService
from ....services.registration_service import RegistrationService

router = APIRouter()


@router.get("/", response_model=Page[EventRead])
async def list_events(
    category: Optional[str] = None,
    search: Optional[str] = None,
    limit: int = Query(100, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Database = Depends(get_db),
) -> Page[EventRead]:
    """Published events ordered by date, optionally filtered by category or text."""
    items, total = await EventService.list_public(db, search=search, category=category, limit=limit, offset=offset)
    return Page[EventRead](items=items, total=total, limit=limit, offset=offset)


@router.get("/{event_id}", response_model=EventRead)
async def get_event(event_id: int = Path(..., description="Event ID"), db: Database = Depends(get_db)) -> EventRead:
    try:
        item = await EventService.get(db, event_id, published_only=True)
    except ValueError as e:
        raise to_http(e)
    return EventRead(**item)


@router.post("/{event_id}/register", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
async def register_for_event(
    data: EventRegistrationCreate,
    event_id: int = Path(..., description="Event ID"),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> RegistrationResponse:
    """Register the caller for an event.

    Fails with 400 when the event is full, closed or the caller is
    already registered.  A pending payment is created for paid events.
    """
    try:
        result = await RegistrationService.register_for_event(db, event_id, current_user["user_id"], data)
    except ValueError as e:
        raise to_http(e)
    return RegistrationResponse(**result)
