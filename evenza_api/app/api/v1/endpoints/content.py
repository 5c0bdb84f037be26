"""Public access to published CMS content."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ....core.db import Database, get_db
from ....core.errors import to_http
from ....core.states import ContentStatus, ContentType
from ....schemas.common import Page
from ....schemas.content import ContentRead
from ....services.content_service import ContentService

router = APIRouter()


@router.get("/", response_model=Page[ContentRead])
async def list_content(
    type: Optional[ContentType] = None,
    homepage: Optional[bool] = None,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Database = Depends(get_db),
) -> Page[ContentRead]:
    items, total = await ContentService.list_content(
        db,
        type=type.value if type else None,
        status=ContentStatus.PUBLISHED.value,
        homepage=homepage,
        limit=limit,
        offset=offset,
    )
    return Page[ContentRead](items=items, total=total, limit=limit, offset=offset)


@router.get("/{slug}", response_model=ContentRead)
async def get_content(slug: str, db: Database = Depends(get_db)) -> ContentRead:
    try:
        item = await ContentService.get_published(db, slug)
    except ValueError as e:
        raise to_http(e)
    return ContentRead(**item)
