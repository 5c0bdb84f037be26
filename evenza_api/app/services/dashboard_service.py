"""
Service layer for dashboards.

The admin overview aggregates counts across the whole platform; the
user dashboard gathers one user's registrations together with a few
entries they could still join.  All queries are read-only.
"""

from __future__ import annotations

from typing import Any, Dict

from ..core.db import Database
from ..core.states import PaymentStatus, QueryStatus
from .activity_service import ActivityService
from .event_service import EventService
from .interview_service import InterviewService
from .registration_service import RegistrationService
from .trip_service import TripService
from .user_service import UserService


class DashboardService:
    """Aggregated views for the admin and user dashboards."""

    @classmethod
    async def admin_overview(cls, db: Database) -> Dict[str, Any]:
        """Return platform totals and the latest activity.

        Revenue sums completed payments only.
        """
        with db.connection() as conn:
            def count(sql: str, *params: Any) -> int:
                return conn.execute(sql, params).fetchone()[0]

            totals = {
                "users": count("SELECT COUNT(*) FROM users"),
                "events": count("SELECT COUNT(*) FROM events"),
                "trips": count("SELECT COUNT(*) FROM trips"),
                "interviews": count("SELECT COUNT(*) FROM interviews"),
                "payments": count("SELECT COUNT(*) FROM payments"),
                "pending_payments": count(
                    "SELECT COUNT(*) FROM payments WHERE status = ?", PaymentStatus.PENDING.value
                ),
                "messages": count("SELECT COUNT(*) FROM messages"),
                "new_messages": count("SELECT COUNT(*) FROM messages WHERE status = ?", QueryStatus.NEW.value),
                "queries": count("SELECT COUNT(*) FROM queries"),
                "revenue": conn.execute(
                    "SELECT COALESCE(SUM(amount), 0) FROM payments WHERE status = ?",
                    (PaymentStatus.COMPLETED.value,),
                ).fetchone()[0],
            }
        recent, _ = await ActivityService.list_activity(db, limit=10)
        return {"totals": totals, "recent_activity": recent}

    @classmethod
    async def user_dashboard(cls, db: Database, user_id: int) -> Dict[str, Any]:
        user = await UserService.get_user(db, user_id)
        registrations = await RegistrationService.list_for_user(db, user_id)
        submissions, _ = await InterviewService.list_submissions(db, user_id=user_id, limit=100)
        with db.connection() as conn:
            queries = conn.execute("SELECT COUNT(*) FROM queries WHERE user_id = ?", (user_id,)).fetchone()[0]
        events = [r for r in registrations if r["kind"] == "event"]
        trips = [r for r in registrations if r["kind"] == "trip"]
        return {
            "user": user,
            "stats": {
                "events": len(events),
                "trips": len(trips),
                "interviews": len(submissions),
                "queries": queries,
            },
            "registered_events": events,
            "registered_trips": trips,
            "interview_submissions": submissions,
            "available_events": await EventService.list_available(db, user_id),
            "available_trips": await TripService.list_available(db, user_id),
            "available_interviews": await InterviewService.list_available(db, user_id),
        }
