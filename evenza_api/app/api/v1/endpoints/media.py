"""Gallery: public listing and recording of uploaded media."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ....core.db import Database, get_db
from ....core.errors import to_http
from ....core.security import get_current_user
from ....core.states import MediaType
from ....schemas.common import Page
from ....schemas.media import MediaCreate, MediaRead
from ....services.media_service import MediaService

router = APIRouter()


@router.get("/", response_model=Page[MediaRead])
async def list_media(
    category: Optional[str] = None,
    type: Optional[MediaType] = None,
    event_id: Optional[int] = None,
    trip_id: Optional[int] = None,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Database = Depends(get_db),
) -> Page[MediaRead]:
    items, total = await MediaService.list_media(
        db,
        category=category,
        type=type.value if type else None,
        event_id=event_id,
        trip_id=trip_id,
        limit=limit,
        offset=offset,
    )
    return Page[MediaRead](items=items, total=total, limit=limit, offset=offset)


@router.post("/", response_model=MediaRead, status_code=status.HTTP_201_CREATED)
async def create_media(
    data: MediaCreate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> MediaRead:
    """Record a gallery item for a file previously stored through ``/upload``."""
    try:
        item = await MediaService.create(db, data, current_user["user_id"])
    except ValueError as e:
        raise to_http(e)
    return MediaRead(**item)
