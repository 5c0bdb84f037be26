"""Gallery media records; the files themselves live in object storage."""

import logging
import sqlite3
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..core.db import Database
from ..core.errors import NotFoundError
from ..core.filters import Op, SelectQuery, fetch_page
from ..schemas.media import MediaCreate
from .storage_service import StorageError, StorageService

logger = logging.getLogger(__name__)


class MediaField(str, Enum):
    ID = "id"
    TYPE = "type"
    CATEGORY = "category"
    TITLE = "title"
    RELATED_EVENT_ID = "related_event_id"
    RELATED_TRIP_ID = "related_trip_id"
    CREATED_AT = "created_at"


class MediaService:
    @classmethod
    async def list_media(
        cls,
        db: Database,
        category: Optional[str] = None,
        type: Optional[str] = None,
        event_id: Optional[int] = None,
        trip_id: Optional[int] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        query = (
            SelectQuery("media", MediaField)
            .where_if(MediaField.CATEGORY, Op.EQ, None if category == "all" else category)
            .where_if(MediaField.TYPE, Op.EQ, type)
            .where_if(MediaField.RELATED_EVENT_ID, Op.EQ, event_id)
            .where_if(MediaField.RELATED_TRIP_ID, Op.EQ, trip_id)
            .order_by(MediaField.CREATED_AT, descending=True)
            .order_by(MediaField.ID, descending=True)
        )
        with db.connection() as conn:
            return fetch_page(conn, query, limit, offset)

    @classmethod
    async def create(cls, db: Database, data: MediaCreate, user_id: int) -> Dict[str, Any]:
        try:
            media_id = cls._insert(db, data, user_id)
        except sqlite3.IntegrityError:
            raise ValueError("Related event or trip does not exist") from None
        with db.connection() as conn:
            row = conn.execute("SELECT * FROM media WHERE id = ?", (media_id,)).fetchone()
        return dict(row)

    @staticmethod
    def _insert(db: Database, data: MediaCreate, user_id: int) -> int:
        with db.connection() as conn:
            cursor = conn.execute(
                """
                INSERT INTO media (title, description, type, url, category, related_event_id, related_trip_id, uploaded_by)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    data.title,
                    data.description,
                    data.type.value,
                    data.url,
                    data.category,
                    data.related_event_id,
                    data.related_trip_id,
                    user_id,
                ),
            )
            return cursor.lastrowid

    @classmethod
    async def delete(cls, db: Database, media_id: int) -> None:
        """Delete the record, then try to remove the stored object."""
        with db.connection() as conn:
            row = conn.execute("SELECT url FROM media WHERE id = ?", (media_id,)).fetchone()
            if not row:
                raise NotFoundError("Media not found")
            conn.execute("DELETE FROM media WHERE id = ?", (media_id,))
        try:
            StorageService.delete(row["url"])
        except StorageError:
            logger.warning("Media %s deleted but its object %s remains in storage", media_id, row["url"])
