"""
Registration, enrollment and application flow.

Events, trips and interviews share one flow:

1. load the target and the caller;
2. reject when the target is closed, full or already joined;
3. insert the membership row and bump the target's counter;
4. mirror the membership in ``user_registrations``;
5. create a pending payment when the target is priced;
6. write an activity entry (best-effort).

Steps 1 to 5 run inside a single ``BEGIN IMMEDIATE`` transaction, so
either all of them are persisted or none is, and two concurrent
registrations cannot both pass the capacity check.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..core.db import Database
from ..core.errors import (
    CapacityError,
    DuplicateRegistrationError,
    NotFoundError,
    RegistrationClosedError,
)
from ..core.states import NOT_REQUIRED, PaymentStatus, PaymentType, SubmissionStatus
from ..schemas.interview import InterviewSubmissionCreate
from ..schemas.registration import EventRegistrationCreate, TripEnrollmentCreate
from .activity_service import ActivityService, ActivityType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Target:
    """How one kind of bookable entity stores its memberships."""

    kind: PaymentType
    label: str
    table: str
    members_table: str
    member_key: str
    counter: str
    capacity: str
    priced: bool
    activity: ActivityType
    closed_message: str
    full_message: str
    duplicate_message: str
    success_message: str


TARGETS: Dict[PaymentType, Target] = {
    PaymentType.EVENT: Target(
        kind=PaymentType.EVENT,
        label="Event",
        table="events",
        members_table="event_attendees",
        member_key="event_id",
        counter="attendee_count",
        capacity="max_attendees",
        priced=True,
        activity=ActivityType.EVENT_REGISTERED,
        closed_message="This event is not open for registration",
        full_message="Event is full",
        duplicate_message="You are already registered for this event",
        success_message="Successfully registered for event",
    ),
    PaymentType.TRIP: Target(
        kind=PaymentType.TRIP,
        label="Trip",
        table="trips",
        members_table="trip_participants",
        member_key="trip_id",
        counter="enrollments",
        capacity="spots",
        priced=True,
        activity=ActivityType.TRIP_ENROLLED,
        closed_message="This trip is not open for enrollment",
        full_message="Trip is full",
        duplicate_message="You are already enrolled in this trip",
        success_message="Successfully enrolled in trip",
    ),
    PaymentType.INTERVIEW: Target(
        kind=PaymentType.INTERVIEW,
        label="Interview",
        table="interviews",
        members_table="interview_submissions",
        member_key="interview_id",
        counter="registrations",
        capacity="slots",
        priced=False,
        activity=ActivityType.INTERVIEW_APPLIED,
        closed_message="This interview is no longer accepting applications",
        full_message="All interview slots are taken",
        duplicate_message="You have already applied for this interview",
        success_message="Successfully applied for interview",
    ),
}


class RegistrationService:
    """Join events, trips and interviews; remove members."""

    @classmethod
    async def register_for_event(
        cls, db: Database, event_id: int, user_id: int, data: EventRegistrationCreate
    ) -> Dict[str, Any]:
        return await cls._register(
            db,
            TARGETS[PaymentType.EVENT],
            event_id,
            user_id,
            {
                "name": data.name,
                "email": data.email,
                "phone": data.phone,
                "tickets": data.tickets,
                "special_requirements": data.special_requirements or "",
            },
            tickets=data.tickets,
        )

    @classmethod
    async def enroll_in_trip(
        cls, db: Database, trip_id: int, user_id: int, data: TripEnrollmentCreate
    ) -> Dict[str, Any]:
        return await cls._register(
            db,
            TARGETS[PaymentType.TRIP],
            trip_id,
            user_id,
            {
                "phone": data.phone,
                "emergency_contact": data.emergency_contact or "",
                "special_requirements": data.special_requirements or "",
            },
        )

    @classmethod
    async def apply_for_interview(
        cls, db: Database, interview_id: int, user_id: int, data: InterviewSubmissionCreate
    ) -> Dict[str, Any]:
        membership = data.model_dump()
        membership["status"] = SubmissionStatus.PENDING.value
        for key, value in membership.items():
            if value is None and key not in {"name", "email", "phone"}:
                membership[key] = ""
        return await cls._register(db, TARGETS[PaymentType.INTERVIEW], interview_id, user_id, membership)

    @classmethod
    async def _register(
        cls,
        db: Database,
        target: Target,
        entity_id: int,
        user_id: int,
        membership: Dict[str, Any],
        tickets: int = 1,
    ) -> Dict[str, Any]:
        """Run the shared registration flow for ``target``.

        Parameters
        ----------
        db : Database
            Application database handle.
        target : Target
            Description of the entity kind being joined.
        entity_id : int
            Primary key of the event, trip or interview.
        user_id : int
            Caller's user id taken from the access token.
        membership : dict
            Column values of the membership row.  ``name``, ``email``
            and ``phone`` fall back to the user's profile when empty.
        tickets : int
            Number of tickets; multiplies the payment amount for events.

        Returns
        -------
        dict
            ``registration`` (the mirrored row), ``payment_id`` and
            ``submission_id`` (``None`` when not applicable) and
            ``message``.
        """
        payment_id: Optional[int] = None
        submission_id: Optional[int] = None
        try:
            with db.transaction() as conn:
                entity = conn.execute(f"SELECT * FROM {target.table} WHERE id = ?", (entity_id,)).fetchone()
                if not entity:
                    raise NotFoundError(f"{target.label} not found")
                user = conn.execute(
                    "SELECT id, name, email, phone FROM users WHERE id = ?", (user_id,)
                ).fetchone()
                if not user:
                    raise NotFoundError("User not found")
                if entity["status"] != "active" or not entity["is_published"]:
                    raise RegistrationClosedError(target.closed_message)

                capacity = entity[target.capacity]
                count = conn.execute(
                    f"SELECT COUNT(*) FROM {target.members_table} WHERE {target.member_key} = ?",
                    (entity_id,),
                ).fetchone()[0]
                if capacity is not None and count >= capacity:
                    raise CapacityError(target.full_message)
                already = conn.execute(
                    f"SELECT 1 FROM {target.members_table} WHERE {target.member_key} = ? AND user_id = ?",
                    (entity_id, user_id),
                ).fetchone()
                if already:
                    raise DuplicateRegistrationError(target.duplicate_message)

                price = float(entity["price"]) if target.priced else 0.0
                payment_status = PaymentStatus.PENDING.value if price > 0 else NOT_REQUIRED

                row = dict(membership)
                row[target.member_key] = entity_id
                row["user_id"] = user_id
                row["name"] = row.get("name") or user["name"]
                row["email"] = row.get("email") or user["email"]
                row["phone"] = row.get("phone") or user["phone"] or ""
                if target.priced:
                    row["payment_status"] = payment_status
                columns = ", ".join(row)
                placeholders = ", ".join("?" for _ in row)
                cursor = conn.execute(
                    f"INSERT INTO {target.members_table} ({columns}) VALUES ({placeholders})",
                    tuple(row.values()),
                )
                if target.kind is PaymentType.INTERVIEW:
                    submission_id = cursor.lastrowid

                conn.execute(
                    f"UPDATE {target.table} SET {target.counter} = {target.counter} + 1, "
                    "updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                    (entity_id,),
                )
                cursor = conn.execute(
                    """
                    INSERT INTO user_registrations
                        (user_id, kind, entity_id, submission_id, tickets, payment_status, status)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        user_id,
                        target.kind.value,
                        entity_id,
                        submission_id,
                        tickets,
                        payment_status,
                        SubmissionStatus.PENDING.value if submission_id else "registered",
                    ),
                )
                registration_id = cursor.lastrowid

                if price > 0:
                    cursor = conn.execute(
                        """
                        INSERT INTO payments (user_id, payment_type, related_id, related_title, amount, status)
                        VALUES (?, ?, ?, ?, ?, ?)
                        """,
                        (
                            user_id,
                            target.kind.value,
                            entity_id,
                            entity["title"],
                            price * tickets,
                            PaymentStatus.PENDING.value,
                        ),
                    )
                    payment_id = cursor.lastrowid
        except sqlite3.IntegrityError as exc:
            # The unique (entity, user) constraint backs up the check above.
            if "UNIQUE" not in str(exc):
                raise
            raise DuplicateRegistrationError(target.duplicate_message) from None

        logger.info(
            "User %s joined %s %s (payment %s)", user_id, target.kind.value, entity_id, payment_id
        )
        metadata: Dict[str, Any] = {f"{target.kind.value}_id": entity_id, "title": entity["title"]}
        if target.kind is PaymentType.EVENT:
            metadata["tickets"] = tickets
        if submission_id:
            metadata["submission_id"] = submission_id
        await ActivityService.record(
            db,
            user_id,
            target.activity.value,
            f"{target.success_message}: {entity['title']}",
            resource_type=target.kind.value,
            resource_id=entity_id,
            metadata=metadata,
        )
        registration = await cls.get_registration(db, registration_id)
        return {
            "message": target.success_message,
            "registration": registration,
            "payment_id": payment_id,
            "submission_id": submission_id,
        }

    @classmethod
    async def get_registration(cls, db: Database, registration_id: int) -> Dict[str, Any]:
        with db.connection() as conn:
            rows = cls._select_registrations(conn, "r.id = ?", (registration_id,))
        if not rows:
            raise NotFoundError("Registration not found")
        return rows[0]

    @classmethod
    async def list_for_user(cls, db: Database, user_id: int, kind: Optional[str] = None) -> List[Dict[str, Any]]:
        """The user's mirrored registrations, newest first."""
        clause, params = "r.user_id = ?", [user_id]
        if kind:
            clause += " AND r.kind = ?"
            params.append(kind)
        with db.connection() as conn:
            return cls._select_registrations(conn, clause, tuple(params))

    @staticmethod
    def _select_registrations(conn: sqlite3.Connection, clause: str, params: tuple) -> List[Dict[str, Any]]:
        rows = conn.execute(
            f"""
            SELECT r.*,
                   COALESCE(e.title, t.title, i.title) AS title,
                   COALESCE(e.date, t.date, i.date) AS date,
                   COALESCE(e.location, t.location, i.location) AS location,
                   COALESCE(e.price, t.price) AS price,
                   COALESCE(s.status, r.status) AS current_status
            FROM user_registrations r
            LEFT JOIN events e ON r.kind = 'event' AND e.id = r.entity_id
            LEFT JOIN trips t ON r.kind = 'trip' AND t.id = r.entity_id
            LEFT JOIN interviews i ON r.kind = 'interview' AND i.id = r.entity_id
            LEFT JOIN interview_submissions s ON s.id = r.submission_id
            WHERE {clause}
            ORDER BY r.registered_at DESC, r.id DESC
            """,
            params,
        ).fetchall()
        registrations = []
        for row in rows:
            item = dict(row)
            item["status"] = item.pop("current_status")
            registrations.append(item)
        return registrations

    @classmethod
    async def remove_member(
        cls, db: Database, kind: PaymentType, entity_id: int, user_id: int, actor: Dict[str, Any]
    ) -> None:
        """Admin removal of one membership.

        Deletes the membership row and the user's mirrored row and
        decrements the counter.  Payments are kept for bookkeeping.
        """
        target = TARGETS[kind]
        with db.transaction() as conn:
            cursor = conn.execute(
                f"DELETE FROM {target.members_table} WHERE {target.member_key} = ? AND user_id = ?",
                (entity_id, user_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(f"User is not a member of this {target.label.lower()}")
            conn.execute(
                f"UPDATE {target.table} SET {target.counter} = MAX({target.counter} - 1, 0), "
                "updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (entity_id,),
            )
            conn.execute(
                "DELETE FROM user_registrations WHERE user_id = ? AND kind = ? AND entity_id = ?",
                (user_id, kind.value, entity_id),
            )
        logger.info("User %s removed from %s %s by %s", user_id, kind.value, entity_id, actor.get("user_id"))
        await ActivityService.record(
            db,
            actor.get("user_id"),
            ActivityType.ADMIN_ACTION.value,
            f"Removed user {user_id} from {kind.value} {entity_id}",
            resource_type=kind.value,
            resource_id=entity_id,
        )
