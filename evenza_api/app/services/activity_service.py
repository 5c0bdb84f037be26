"""
Activity service for recording and querying user and admin actions.

This module provides a centralized API for writing activity entries to
the ``activity_logs`` table and retrieving them with filters and
pagination.  Writes through ``record`` are best-effort: a failure is
logged and never propagated, so a broken activity log cannot fail the
operation that triggered it.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..core.db import Database
from ..core.filters import Op, SelectQuery, fetch_page

logger = logging.getLogger(__name__)


class ActivityType(str, Enum):
    REGISTER = "REGISTER"
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    PROFILE_UPDATED = "PROFILE_UPDATED"
    PASSWORD_CHANGED = "PASSWORD_CHANGED"
    EVENT_REGISTERED = "EVENT_REGISTERED"
    TRIP_ENROLLED = "TRIP_ENROLLED"
    INTERVIEW_APPLIED = "INTERVIEW_APPLIED"
    PAYMENT_PROOF_SUBMITTED = "PAYMENT_PROOF_SUBMITTED"
    PAYMENT_STATUS_CHANGED = "PAYMENT_STATUS_CHANGED"
    SUBMISSION_REVIEWED = "SUBMISSION_REVIEWED"
    QUERY_CREATED = "QUERY_CREATED"
    QUERY_ANSWERED = "QUERY_ANSWERED"
    ADMIN_ACTION = "ADMIN_ACTION"


class ActivityField(str, Enum):
    ID = "id"
    USER_ID = "user_id"
    TYPE = "type"
    RESOURCE_TYPE = "resource_type"
    DESCRIPTION = "description"
    CREATED_AT = "created_at"


class ActivityService:
    """Service class for writing and retrieving activity logs."""

    @classmethod
    async def log(
        cls,
        db: Database,
        user_id: Optional[int],
        type: str,
        description: str,
        resource_type: Optional[str] = None,
        resource_id: Optional[int] = None,
        metadata: Optional[dict] = None,
    ) -> None:
        """Insert a new activity record.

        Parameters
        ----------
        db : Database
            Application database handle.
        user_id : Optional[int]
            ID of the user performing the action.  May be ``None`` for
            system‑initiated actions.
        type : str
            Upper-case activity kind (e.g. ``"LOGIN"``, ``"EVENT_REGISTRATION"``).
        description : str
            Human readable summary shown on dashboards.
        resource_type : Optional[str]
            Type of object affected (e.g. "event", "payment").
        resource_id : Optional[int]
            Primary key of the affected object, if applicable.
        metadata : Optional[dict]
            Additional structured data about the action, stored as JSON.
        """
        with db.connection() as conn:
            conn.execute(
                """
                INSERT INTO activity_logs (user_id, type, description, resource_type, resource_id, metadata)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    user_id,
                    type,
                    description,
                    resource_type,
                    resource_id,
                    json.dumps(metadata) if metadata else None,
                ),
            )

    @classmethod
    async def record(cls, db: Database, user_id: Optional[int], type: str, description: str, **kwargs: Any) -> None:
        """Like ``log`` but never raises."""
        try:
            await cls.log(db, user_id, type, description, **kwargs)
        except Exception:
            logger.warning("Could not write %s activity for user %s", type, user_id, exc_info=True)

    @classmethod
    async def list_activity(
        cls,
        db: Database,
        user_id: Optional[int] = None,
        type: Optional[str] = None,
        resource_type: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """Retrieve activity records, newest first, with optional filters."""
        query = (
            SelectQuery("activity_logs", ActivityField)
            .where_if(ActivityField.USER_ID, Op.EQ, user_id)
            .where_if(ActivityField.TYPE, Op.EQ, type)
            .where_if(ActivityField.RESOURCE_TYPE, Op.EQ, resource_type)
            .search([ActivityField.DESCRIPTION], search)
            .order_by(ActivityField.CREATED_AT, descending=True)
            .order_by(ActivityField.ID, descending=True)
        )
        with db.connection() as conn:
            rows, total = fetch_page(conn, query, limit, offset)
        for row in rows:
            if row["metadata"]:
                try:
                    row["metadata"] = json.loads(row["metadata"])
                except json.JSONDecodeError:
                    pass
        return rows, total
