"""
Shared CRUD for the three bookable catalogues: events, trips and
interviews.

Each catalogue is a table with a membership child table, a counter
column on the parent row and an optional capacity column.  The
concrete services (``EventService``, ``TripService``,
``InterviewService``) only declare those names and their filterable
columns; listing, lookup, creation, update and deletion live here.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel

from ..core.db import Database
from ..core.errors import NotFoundError
from ..core.filters import Op, SelectQuery, fetch_page
from .activity_service import ActivityService, ActivityType

logger = logging.getLogger(__name__)


class CatalogueService:
    """Base class; subclasses set the class attributes below."""

    table: str
    label: str
    fields: Type[Enum]
    members_table: str
    member_key: str
    counter: str
    search_columns: Tuple[str, ...] = ("title", "description", "location")
    bool_columns: Tuple[str, ...] = ("is_published",)
    json_columns: Tuple[str, ...] = ()
    # Columns an update may set to NULL; explicit nulls elsewhere are ignored.
    nullable_columns: Tuple[str, ...] = ("image",)

    @classmethod
    def _decode(cls, row) -> Dict[str, Any]:
        item = dict(row)
        for column in cls.bool_columns:
            if column in item:
                item[column] = bool(item[column])
        for column in cls.json_columns:
            if column in item:
                item[column] = json.loads(item[column] or "[]")
        return item

    @classmethod
    def _encode(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        encoded = {}
        for key, value in values.items():
            if isinstance(value, Enum):
                value = value.value
            elif key in cls.bool_columns and value is not None:
                value = int(value)
            elif key in cls.json_columns:
                value = json.dumps(value or [])
            encoded[key] = value
        return encoded

    @classmethod
    def _field(cls, name: str) -> Enum:
        return cls.fields(name)

    @classmethod
    def _query(cls, search: Optional[str]) -> SelectQuery:
        return SelectQuery(cls.table, cls.fields).search(
            [cls._field(column) for column in cls.search_columns], search
        )

    @classmethod
    async def list_public(
        cls,
        db: Database,
        search: Optional[str] = None,
        category: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """Published entries ordered by date, soonest first."""
        query = cls._query(search).where(cls._field("is_published"), Op.EQ, 1)
        if category and category.lower() != "all":
            query.where(cls._field("category"), Op.EQ, category)
        query.order_by(cls._field("date"))
        with db.connection() as conn:
            rows, total = fetch_page(conn, query, limit, offset)
        return [cls._decode(row) for row in rows], total

    @classmethod
    async def list_admin(
        cls,
        db: Database,
        status: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        query = (
            cls._query(search)
            .where_if(cls._field("status"), Op.EQ, status)
            .order_by(cls._field("created_at"), descending=True)
            .order_by(cls._field("id"), descending=True)
        )
        with db.connection() as conn:
            rows, total = fetch_page(conn, query, limit, offset)
        return [cls._decode(row) for row in rows], total

    @classmethod
    async def list_available(cls, db: Database, exclude_user_id: int, limit: int = 6) -> List[Dict[str, Any]]:
        """Published, active entries the user has not joined yet."""
        with db.connection() as conn:
            rows = conn.execute(
                f"SELECT * FROM {cls.table} WHERE is_published = 1 AND status = 'active' "
                f"AND id NOT IN (SELECT {cls.member_key} FROM {cls.members_table} WHERE user_id = ?) "
                "ORDER BY date ASC LIMIT ?",
                (exclude_user_id, limit),
            ).fetchall()
        return [cls._decode(row) for row in rows]

    @classmethod
    async def get(cls, db: Database, item_id: int, published_only: bool = False) -> Dict[str, Any]:
        with db.connection() as conn:
            row = conn.execute(f"SELECT * FROM {cls.table} WHERE id = ?", (item_id,)).fetchone()
        if not row or (published_only and not row["is_published"]):
            raise NotFoundError(f"{cls.label} not found")
        return cls._decode(row)

    @classmethod
    async def members(cls, db: Database, item_id: int) -> List[Dict[str, Any]]:
        """Membership rows of one entry in registration order."""
        with db.connection() as conn:
            rows = conn.execute(
                f"SELECT * FROM {cls.members_table} WHERE {cls.member_key} = ? ORDER BY id",
                (item_id,),
            ).fetchall()
        return [dict(row) for row in rows]

    @classmethod
    async def create(cls, db: Database, data: BaseModel, actor: Dict[str, Any]) -> Dict[str, Any]:
        values = cls._encode(data.model_dump())
        columns = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        with db.connection() as conn:
            cursor = conn.execute(
                f"INSERT INTO {cls.table} ({columns}) VALUES ({placeholders})",
                tuple(values.values()),
            )
            item_id = cursor.lastrowid
        logger.info("%s %s created by user %s", cls.label, item_id, actor.get("user_id"))
        await ActivityService.record(
            db,
            actor.get("user_id"),
            ActivityType.ADMIN_ACTION.value,
            f"Created {cls.label.lower()}: {values.get('title')}",
            resource_type=cls.label.lower(),
            resource_id=item_id,
        )
        return await cls.get(db, item_id)

    @classmethod
    async def update(cls, db: Database, item_id: int, data: BaseModel, actor: Dict[str, Any]) -> Dict[str, Any]:
        """Apply the fields present in ``data``; others keep their value."""
        await cls.get(db, item_id)
        changes = data.model_dump(exclude_unset=True)
        values = cls._encode(
            {key: value for key, value in changes.items() if value is not None or key in cls.nullable_columns}
        )
        if values:
            assignments = ", ".join(f"{column} = ?" for column in values)
            with db.connection() as conn:
                conn.execute(
                    f"UPDATE {cls.table} SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                    (*values.values(), item_id),
                )
            await ActivityService.record(
                db,
                actor.get("user_id"),
                ActivityType.ADMIN_ACTION.value,
                f"Updated {cls.label.lower()} {item_id}",
                resource_type=cls.label.lower(),
                resource_id=item_id,
                metadata={"fields": sorted(values)},
            )
        return await cls.get(db, item_id)

    @classmethod
    async def delete(cls, db: Database, item_id: int, actor: Dict[str, Any]) -> None:
        """Delete an entry, its memberships and the users' mirrored rows."""
        kind = cls.label.lower()
        with db.transaction() as conn:
            row = conn.execute(f"SELECT title FROM {cls.table} WHERE id = ?", (item_id,)).fetchone()
            if not row:
                raise NotFoundError(f"{cls.label} not found")
            conn.execute(
                "DELETE FROM user_registrations WHERE kind = ? AND entity_id = ?",
                (kind, item_id),
            )
            conn.execute(f"DELETE FROM {cls.table} WHERE id = ?", (item_id,))
        logger.info("%s %s deleted by user %s", cls.label, item_id, actor.get("user_id"))
        await ActivityService.record(
            db,
            actor.get("user_id"),
            ActivityType.ADMIN_ACTION.value,
            f"Deleted {kind}: {row['title']}",
            resource_type=kind,
            resource_id=item_id,
        )
