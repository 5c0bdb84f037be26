"""Admin removal of gallery media."""

from fastapi import APIRouter, Depends, Path

from ....core.db import Database, get_db
from ....core.errors import to_http
from ....schemas.common import Message
from ....services.media_service import MediaService

router = APIRouter()


@router.delete("/{media_id}", response_model=Message)
async def delete_media(media_id: int = Path(..., description="Media ID"), db: Database = Depends(get_db)) -> Message:
    try:
        await MediaService.delete(db, media_id)
    except ValueError as e:
        raise to_http(e)
    return Message(message="Media deleted")
