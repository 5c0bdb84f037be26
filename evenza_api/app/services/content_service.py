"""
Business logic for CMS content.

Content entries are addressed publicly by ``slug``, which is unique.
At most one entry is flagged as the homepage; flagging another entry
clears the flag on the previous one in the same transaction.
"""

import logging
import sqlite3
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..core.db import Database
from ..core.errors import ConflictError, NotFoundError
from ..core.filters import Op, SelectQuery, fetch_page
from ..core.states import ContentStatus
from ..schemas.content import ContentCreate, ContentUpdate
from .activity_service import ActivityService, ActivityType

logger = logging.getLogger(__name__)


class ContentField(str, Enum):
    ID = "id"
    TITLE = "title"
    SLUG = "slug"
    TYPE = "type"
    BODY = "body"
    STATUS = "status"
    IS_HOMEPAGE = "is_homepage"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


def _decode(row) -> Dict[str, Any]:
    item = dict(row)
    item["is_homepage"] = bool(item["is_homepage"])
    return item


def _encode(values: Dict[str, Any]) -> Dict[str, Any]:
    encoded = {}
    for key, value in values.items():
        if isinstance(value, Enum):
            value = value.value
        elif key == "is_homepage":
            value = int(bool(value))
        encoded[key] = value
    return encoded


class ContentService:
    """Service for pages, posts, legal texts and FAQ entries."""

    @classmethod
    async def list_content(
        cls,
        db: Database,
        type: Optional[str] = None,
        status: Optional[str] = None,
        homepage: Optional[bool] = None,
        search: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        query = (
            SelectQuery("content", ContentField)
            .where_if(ContentField.TYPE, Op.EQ, type)
            .where_if(ContentField.STATUS, Op.EQ, status)
            .where_if(ContentField.IS_HOMEPAGE, Op.EQ, None if homepage is None else int(homepage))
            .search([ContentField.TITLE, ContentField.SLUG, ContentField.BODY], search)
            .order_by(ContentField.UPDATED_AT, descending=True)
            .order_by(ContentField.ID, descending=True)
        )
        with db.connection() as conn:
            rows, total = fetch_page(conn, query, limit, offset)
        return [_decode(row) for row in rows], total

    @classmethod
    async def get_published(cls, db: Database, slug: str) -> Dict[str, Any]:
        with db.connection() as conn:
            row = conn.execute(
                "SELECT * FROM content WHERE slug = ? AND status = ?",
                (slug.lower(), ContentStatus.PUBLISHED.value),
            ).fetchone()
        if not row:
            raise NotFoundError("Content not found")
        return _decode(row)

    @classmethod
    async def get(cls, db: Database, content_id: int) -> Dict[str, Any]:
        with db.connection() as conn:
            row = conn.execute("SELECT * FROM content WHERE id = ?", (content_id,)).fetchone()
        if not row:
            raise NotFoundError("Content not found")
        return _decode(row)

    @classmethod
    async def create(cls, db: Database, data: ContentCreate, actor: Dict[str, Any]) -> Dict[str, Any]:
        values = _encode(data.model_dump())
        values["author"] = values.get("author") or actor.get("name")
        values["created_by"] = actor.get("user_id")
        columns = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        try:
            with db.transaction() as conn:
                if values["is_homepage"]:
                    conn.execute("UPDATE content SET is_homepage = 0 WHERE is_homepage = 1")
                cursor = conn.execute(
                    f"INSERT INTO content ({columns}) VALUES ({placeholders})", tuple(values.values())
                )
                content_id = cursor.lastrowid
        except sqlite3.IntegrityError:
            raise ConflictError("Content with this slug already exists") from None
        await ActivityService.record(
            db,
            actor.get("user_id"),
            ActivityType.ADMIN_ACTION.value,
            f"Created content: {values['title']}",
            resource_type="content",
            resource_id=content_id,
        )
        return await cls.get(db, content_id)

    @classmethod
    async def update(
        cls, db: Database, content_id: int, data: ContentUpdate, actor: Dict[str, Any]
    ) -> Dict[str, Any]:
        await cls.get(db, content_id)
        changes = data.model_dump(exclude_unset=True)
        values = _encode({key: value for key, value in changes.items() if value is not None or key == "author"})
        if values:
            assignments = ", ".join(f"{column} = ?" for column in values)
            try:
                with db.transaction() as conn:
                    if values.get("is_homepage"):
                        conn.execute(
                            "UPDATE content SET is_homepage = 0 WHERE is_homepage = 1 AND id != ?", (content_id,)
                        )
                    conn.execute(
                        f"UPDATE content SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                        (*values.values(), content_id),
                    )
            except sqlite3.IntegrityError:
                raise ConflictError("Content with this slug already exists") from None
            await ActivityService.record(
                db,
                actor.get("user_id"),
                ActivityType.ADMIN_ACTION.value,
                f"Updated content {content_id}",
                resource_type="content",
                resource_id=content_id,
            )
        return await cls.get(db, content_id)

    @classmethod
    async def delete(cls, db: Database, content_id: int, actor: Dict[str, Any]) -> None:
        with db.connection() as conn:
            cursor = conn.execute("DELETE FROM content WHERE id = ?", (content_id,))
            if cursor.rowcount == 0:
                raise NotFoundError("Content not found")
        logger.info("Content %s deleted by user %s", content_id, actor.get("user_id"))
