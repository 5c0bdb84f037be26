"""Support queries submitted by signed-in users."""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from ....core.db import Database, get_db
from ....core.errors import to_http
from ....core.security import get_current_user
from ....schemas.common import Page
from ....schemas.query import QueryCreate, QueryRead
from ....services.query_service import QueryService

router = APIRouter()


@router.post("/", response_model=QueryRead, status_code=status.HTTP_201_CREATED)
async def create_query(
    data: QueryCreate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> QueryRead:
    """Submit a query.  It also appears in the admin message inbox."""
    try:
        item = await QueryService.create_query(db, current_user, data)
    except ValueError as e:
        raise to_http(e)
    return QueryRead(**item)


@router.get("/", response_model=Page[QueryRead])
async def list_my_queries(
    status_param: Optional[str] = Query(None, alias="status"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> Page[QueryRead]:
    try:
        items, total = await QueryService.list_queries(
            db, user_id=current_user["user_id"], status=status_param, limit=limit, offset=offset
        )
    except ValueError as e:
        raise to_http(e)
    return Page[QueryRead](items=items, total=total, limit=limit, offset=offset)


@router.get("/{query_id}", response_model=QueryRead)
async def get_query(
    query_id: int = Path(..., description="Query ID"),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> QueryRead:
    try:
        item = await QueryService.get_query(db, query_id, current_user)
    except ValueError as e:
        raise to_http(e)
    return QueryRead(**item)
