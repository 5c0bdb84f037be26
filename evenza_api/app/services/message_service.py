"""
Admin inbox of contact messages.

Messages are created from user queries (see ``QueryService``).  Admins
triage them through the query status state machine; a message linked
to a query carries its status over to the query.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..core.db import Database
from ..core.errors import NotFoundError
from ..core.filters import Op, SelectQuery, fetch_page
from ..core.states import QUERY_STATES

logger = logging.getLogger(__name__)


class MessageField(str, Enum):
    ID = "id"
    STATUS = "status"
    NAME = "name"
    EMAIL = "email"
    SUBJECT = "subject"
    MESSAGE = "message"
    CREATED_AT = "created_at"


class MessageService:
    """Service for the admin message inbox."""

    @classmethod
    async def list_messages(
        cls,
        db: Database,
        status: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        if status and status != "all":
            QUERY_STATES.parse(status)
        else:
            status = None
        query = (
            SelectQuery("messages", MessageField)
            .where_if(MessageField.STATUS, Op.EQ, status)
            .search([MessageField.NAME, MessageField.EMAIL, MessageField.SUBJECT, MessageField.MESSAGE], search)
            .order_by(MessageField.CREATED_AT, descending=True)
            .order_by(MessageField.ID, descending=True)
        )
        with db.connection() as conn:
            return fetch_page(conn, query, limit, offset)

    @classmethod
    async def get_message(cls, db: Database, message_id: int) -> Dict[str, Any]:
        with db.connection() as conn:
            row = conn.execute("SELECT * FROM messages WHERE id = ?", (message_id,)).fetchone()
        if not row:
            raise NotFoundError("Message not found")
        return dict(row)

    @classmethod
    async def update_message(
        cls,
        db: Database,
        message_id: int,
        actor: Dict[str, Any],
        status: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        with db.transaction() as conn:
            row = conn.execute("SELECT status, query_id FROM messages WHERE id = ?", (message_id,)).fetchone()
            if not row:
                raise NotFoundError("Message not found")
            new_status = QUERY_STATES.check(row["status"], status).value if status else row["status"]
            conn.execute(
                "UPDATE messages SET status = ?, notes = COALESCE(?, notes), updated_at = CURRENT_TIMESTAMP "
                "WHERE id = ?",
                (new_status, notes, message_id),
            )
            if row["query_id"] is not None and new_status != row["status"]:
                conn.execute(
                    "UPDATE queries SET status = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                    (new_status, row["query_id"]),
                )
        logger.info("Message %s updated by user %s", message_id, actor.get("user_id"))
        return await cls.get_message(db, message_id)

    @classmethod
    async def delete_message(cls, db: Database, message_id: int) -> None:
        with db.connection() as conn:
            cursor = conn.execute("DELETE FROM messages WHERE id = ?", (message_id,))
            if cursor.rowcount == 0:
                raise NotFoundError("Message not found")
