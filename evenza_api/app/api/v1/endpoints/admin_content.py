"""Admin CMS content management."""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from ....core.db import Database, get_db
from ....core.errors import to_http
from ....core.security import require_admin
from ....core.states import ContentStatus, ContentType
from ....schemas.common import Message, Page
from ....schemas.content import ContentCreate, ContentRead, ContentUpdate
from ....services.content_service import ContentService

router = APIRouter()


@router.get("/", response_model=Page[ContentRead])
async def list_content(
    type: Optional[ContentType] = None,
    status_param: Optional[ContentStatus] = Query(None, alias="status"),
    search: Optional[str] = None,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Database = Depends(get_db),
) -> Page[ContentRead]:
    items, total = await ContentService.list_content(
        db,
        type=type.value if type else None,
        status=status_param.value if status_param else None,
        search=search,
        limit=limit,
        offset=offset,
    )
    return Page[ContentRead](items=items, total=total, limit=limit, offset=offset)


@router.post("/", response_model=ContentRead, status_code=status.HTTP_201_CREATED)
async def create_content(
    data: ContentCreate,
    current_user: dict = Depends(require_admin),
    db: Database = Depends(get_db),
) -> ContentRead:
    """Create an entry.  The slug must be unique (409 otherwise)."""
    try:
        item = await ContentService.create(db, data, current_user)
    except ValueError as e:
        raise to_http(e)
    return ContentRead(**item)


@router.get("/{content_id}", response_model=ContentRead)
async def get_content(content_id: int = Path(..., description="Content ID"), db: Database = Depends(get_db)) -> ContentRead:
    try:
        item = await ContentService.get(db, content_id)
    except ValueError as e:
        raise to_http(e)
    return ContentRead(**item)


@router.put("/{content_id}", response_model=ContentRead)
async def update_content(
    data: ContentUpdate,
    content_id: int = Path(..., description="Content ID"),
    current_user: dict = Depends(require_admin),
    db: Database = Depends(get_db),
) -> ContentRead:
    try:
        item = await ContentService.update(db, content_id, data, current_user)
    except ValueError as e:
        raise to_http(e)
    return ContentRead(**item)


@router.delete("/{content_id}", response_model=Message)
async def delete_content(
    content_id: int = Path(..., description="Content ID"),
    current_user: dict = Depends(require_admin),
    db: Database = Depends(get_db),
) -> Message:
    try:
        await ContentService.delete(db, content_id, current_user)
    except ValueError as e:
        raise to_http(e)
    return Message(message="Content deleted")
