"""Admin inbox: contact messages and user queries."""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from ....core.db import Database, get_db
from ....core.errors import to_http
from ....core.security import require_admin
from ....schemas.common import Message, Page
from ....schemas.query import MessageRead, MessageUpdate, QueryRead, QueryResponse
from ....services.message_service import MessageService
from ....services.query_service import QueryService

messages_router = APIRouter()
queries_router = APIRouter()


@messages_router.get("/", response_model=Page[MessageRead])
async def list_messages(
    status_param: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Database = Depends(get_db),
) -> Page[MessageRead]:
    try:
        items, total = await MessageService.list_messages(
            db, status=status_param, search=search, limit=limit, offset=offset
        )
    except ValueError as e:
        raise to_http(e)
    return Page[MessageRead](items=items, total=total, limit=limit, offset=offset)


@messages_router.get("/{message_id}", response_model=MessageRead)
async def get_message(message_id: int = Path(..., description="Message ID"), db: Database = Depends(get_db)) -> MessageRead:
    try:
        item = await MessageService.get_message(db, message_id)
    except ValueError as e:
        raise to_http(e)
    return MessageRead(**item)


@messages_router.patch("/{message_id}", response_model=MessageRead)
async def update_message(
    data: MessageUpdate,
    message_id: int = Path(..., description="Message ID"),
    current_user: dict = Depends(require_admin),
    db: Database = Depends(get_db),
) -> MessageRead:
    try:
        message = await MessageService.update_message(db, message_id, current_user, data.status, data.notes)
    except ValueError as e:
        raise to_http(e)
    return MessageRead(**message)


@messages_router.delete("/{message_id}", response_model=Message)
async def delete_message(message_id: int = Path(..., description="Message ID"), db: Database = Depends(get_db)) -> Message:
    try:
        await MessageService.delete_message(db, message_id)
    except ValueError as e:
        raise to_http(e)
    return Message(message="Message deleted")


@queries_router.get("/", response_model=Page[QueryRead])
async def list_queries(
    status_param: Optional[str] = Query(None, alias="status"),
    user_id: Optional[int] = None,
    search: Optional[str] = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Database = Depends(get_db),
) -> Page[QueryRead]:
    try:
        items, total = await QueryService.list_queries(
            db, user_id=user_id, status=status_param, search=search, limit=limit, offset=offset
        )
    except ValueError as e:
        raise to_http(e)
    return Page[QueryRead](items=items, total=total, limit=limit, offset=offset)


@queries_router.put("/{query_id}/respond", response_model=QueryRead)
async def respond_to_query(
    data: QueryResponse,
    query_id: int = Path(..., description="Query ID"),
    current_user: dict = Depends(require_admin),
    db: Database = Depends(get_db),
) -> QueryRead:
    """Store the reply, mark the query answered and email the user."""
    try:
        item = await QueryService.respond(db, query_id, data.response, current_user)
    except ValueError as e:
        raise to_http(e)
    return QueryRead(**item)
