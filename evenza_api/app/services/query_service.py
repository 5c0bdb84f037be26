"""
Business logic for user support queries.

A query submitted by a user is also copied into the admin message
inbox, so the ``messages`` table holds every conversation regardless
of how it reached the platform.  Both records share the query status
state machine and are kept in step when either changes.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..core.db import Database
from ..core.errors import ForbiddenError, NotFoundError
from ..core.filters import Op, SelectQuery, fetch_page
from ..core.security import is_authorized
from ..core.states import ADMIN_ROLES, QUERY_STATES, QueryStatus
from ..schemas.query import QueryCreate
from .activity_service import ActivityService, ActivityType
from .email_service import EmailService

logger = logging.getLogger(__name__)


class QueryField(str, Enum):
    ID = "id"
    USER_ID = "user_id"
    STATUS = "status"
    NAME = "name"
    EMAIL = "email"
    SUBJECT = "subject"
    MESSAGE = "message"
    CREATED_AT = "created_at"


class QueryService:
    """Service for support queries."""

    @classmethod
    async def create_query(cls, db: Database, identity: Dict[str, Any], data: QueryCreate) -> Dict[str, Any]:
        """Store a new query and its inbox message with status ``new``."""
        user_id = identity["user_id"]
        name = data.name or identity.get("name") or ""
        email = (data.email or identity.get("email") or "").lower()
        with db.transaction() as conn:
            if not conn.execute("SELECT 1 FROM users WHERE id = ?", (user_id,)).fetchone():
                raise NotFoundError("User not found")
            cursor = conn.execute(
                "INSERT INTO queries (user_id, name, email, subject, message, status) VALUES (?, ?, ?, ?, ?, ?)",
                (user_id, name, email, data.subject, data.message, QueryStatus.NEW.value),
            )
            query_id = cursor.lastrowid
            conn.execute(
                "INSERT INTO messages (user_id, query_id, name, email, subject, message, status) "
                "VALUES (?, ?, ?, ?, ?, ?, ?)",
                (user_id, query_id, name, email, data.subject, data.message, QueryStatus.NEW.value),
            )
        logger.info("Query %s submitted by user %s", query_id, user_id)
        await ActivityService.record(
            db,
            user_id,
            ActivityType.QUERY_CREATED.value,
            f"Submitted query: {data.subject}",
            resource_type="query",
            resource_id=query_id,
        )
        return await cls._get(db, query_id)

    @classmethod
    async def _get(cls, db: Database, query_id: int) -> Dict[str, Any]:
        with db.connection() as conn:
            row = conn.execute("SELECT * FROM queries WHERE id = ?", (query_id,)).fetchone()
        if not row:
            raise NotFoundError("Query not found")
        return dict(row)

    @classmethod
    async def get_query(cls, db: Database, query_id: int, identity: Dict[str, Any]) -> Dict[str, Any]:
        """Return a query the caller owns; admins may read any query."""
        query = await cls._get(db, query_id)
        if query["user_id"] != identity["user_id"] and not is_authorized(identity, ADMIN_ROLES):
            raise ForbiddenError("You do not have access to this query")
        return query

    @classmethod
    async def list_queries(
        cls,
        db: Database,
        user_id: Optional[int] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        if status:
            QUERY_STATES.parse(status)
        query = (
            SelectQuery("queries", QueryField)
            .where_if(QueryField.USER_ID, Op.EQ, user_id)
            .where_if(QueryField.STATUS, Op.EQ, status)
            .search([QueryField.SUBJECT, QueryField.MESSAGE, QueryField.NAME, QueryField.EMAIL], search)
            .order_by(QueryField.CREATED_AT, descending=True)
            .order_by(QueryField.ID, descending=True)
        )
        with db.connection() as conn:
            return fetch_page(conn, query, limit, offset)

    @classmethod
    async def respond(cls, db: Database, query_id: int, response: str, actor: Dict[str, Any]) -> Dict[str, Any]:
        """Record an admin reply and mark the query answered."""
        with db.transaction() as conn:
            row = conn.execute("SELECT status FROM queries WHERE id = ?", (query_id,)).fetchone()
            if not row:
                raise NotFoundError("Query not found")
            state = QUERY_STATES.check(row["status"], QueryStatus.ANSWERED.value)
            conn.execute(
                """
                UPDATE queries
                SET response = ?, status = ?, responded_by = ?,
                    responded_at = CURRENT_TIMESTAMP, updated_at = CURRENT_TIMESTAMP
                WHERE id = ?
                """,
                (response, state.value, actor.get("user_id"), query_id),
            )
            conn.execute(
                "UPDATE messages SET status = ?, updated_at = CURRENT_TIMESTAMP WHERE query_id = ?",
                (state.value, query_id),
            )
        query = await cls._get(db, query_id)
        await ActivityService.record(
            db,
            actor.get("user_id"),
            ActivityType.QUERY_ANSWERED.value,
            f"Answered query: {query['subject']}",
            resource_type="query",
            resource_id=query_id,
        )
        EmailService.query_answered(query["email"], query["name"], query["subject"], response)
        return query
