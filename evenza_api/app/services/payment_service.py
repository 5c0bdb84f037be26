"""
Business logic for payments.

Payments are created by the registration flow for priced events and
trips.  Users attach a proof of transfer to their pending payments;
administrators then move each payment through the payment state
machine.  A status change is mirrored on the matching membership row
and on the user's registration so both always agree, and the payer is
notified by email (best-effort).
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..core.db import Database
from ..core.errors import ForbiddenError, NotFoundError
from ..core.filters import Op, SelectQuery, fetch_page
from ..core.states import PAYMENT_STATES, PaymentStatus, PaymentType
from .activity_service import ActivityService, ActivityType
from .email_service import EmailService
from .registration_service import TARGETS

logger = logging.getLogger(__name__)

PAYMENT_VIEW = (
    "(SELECT p.*, u.name AS user_name, u.email AS user_email "
    "FROM payments p LEFT JOIN users u ON u.id = p.user_id)"
)


class PaymentField(str, Enum):
    ID = "id"
    USER_ID = "user_id"
    STATUS = "status"
    PAYMENT_TYPE = "payment_type"
    RELATED_ID = "related_id"
    RELATED_TITLE = "related_title"
    USER_NAME = "user_name"
    USER_EMAIL = "user_email"
    CREATED_AT = "created_at"


class PaymentService:
    """Service for listing payments and managing their lifecycle."""

    @classmethod
    async def list_payments(
        cls,
        db: Database,
        user_id: Optional[int] = None,
        status: Optional[str] = None,
        payment_type: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """Return one page of payments, newest first.

        ``status`` and ``payment_type`` must be members of their
        enumerations; unknown values raise ``ValueError``.
        """
        if status:
            PAYMENT_STATES.parse(status)
        if payment_type:
            PaymentType(payment_type)
        query = (
            SelectQuery(PAYMENT_VIEW, PaymentField)
            .where_if(PaymentField.USER_ID, Op.EQ, user_id)
            .where_if(PaymentField.STATUS, Op.EQ, status)
            .where_if(PaymentField.PAYMENT_TYPE, Op.EQ, payment_type)
            .search([PaymentField.RELATED_TITLE, PaymentField.USER_NAME, PaymentField.USER_EMAIL], search)
            .order_by(PaymentField.CREATED_AT, descending=True)
            .order_by(PaymentField.ID, descending=True)
        )
        with db.connection() as conn:
            return fetch_page(conn, query, limit, offset)

    @classmethod
    async def get_payment(cls, db: Database, payment_id: int) -> Dict[str, Any]:
        with db.connection() as conn:
            row = conn.execute(f"SELECT * FROM {PAYMENT_VIEW} WHERE id = ?", (payment_id,)).fetchone()
        if not row:
            raise NotFoundError("Payment not found")
        return dict(row)

    @classmethod
    async def update_status(
        cls,
        db: Database,
        payment_id: int,
        new_status: str,
        actor: Dict[str, Any],
        notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Move a payment to ``new_status`` and stamp the verifier.

        Raises ``InvalidStatusError`` for values outside the payment
        enumeration and ``InvalidTransitionError`` for changes the
        transition table forbids; in both cases nothing is written.
        """
        with db.transaction() as conn:
            payment = conn.execute("SELECT * FROM payments WHERE id = ?", (payment_id,)).fetchone()
            if not payment:
                raise NotFoundError("Payment not found")
            state = PAYMENT_STATES.check(payment["status"], new_status)
            conn.execute(
                """
                UPDATE payments
                SET status = ?, notes = COALESCE(?, notes), verified_by = ?,
                    verified_at = CURRENT_TIMESTAMP, updated_at = CURRENT_TIMESTAMP
                WHERE id = ?
                """,
                (state.value, notes, actor.get("user_id"), payment_id),
            )
            kind = PaymentType(payment["payment_type"])
            if kind in TARGETS and TARGETS[kind].priced:
                target = TARGETS[kind]
                conn.execute(
                    f"UPDATE {target.members_table} SET payment_status = ? "
                    f"WHERE {target.member_key} = ? AND user_id = ?",
                    (state.value, payment["related_id"], payment["user_id"]),
                )
                conn.execute(
                    "UPDATE user_registrations SET payment_status = ? "
                    "WHERE user_id = ? AND kind = ? AND entity_id = ?",
                    (state.value, payment["user_id"], kind.value, payment["related_id"]),
                )
        logger.info(
            "Payment %s changed from %s to %s by user %s",
            payment_id,
            payment["status"],
            state.value,
            actor.get("user_id"),
        )
        updated = await cls.get_payment(db, payment_id)
        await ActivityService.record(
            db,
            actor.get("user_id"),
            ActivityType.PAYMENT_STATUS_CHANGED.value,
            f"Payment {payment_id} marked {state.value}",
            resource_type="payment",
            resource_id=payment_id,
            metadata={"from": payment["status"], "to": state.value},
        )
        if state.value != payment["status"] and updated.get("user_email"):
            EmailService.payment_status_changed(
                updated["user_email"],
                updated.get("user_name") or "",
                updated.get("related_title") or kind.value,
                updated["amount"],
                state.value,
            )
        return updated

    @classmethod
    async def submit_proof(
        cls, db: Database, payment_id: int, user_id: int, proof_url: str, notes: Optional[str] = None
    ) -> Dict[str, Any]:
        """Attach a proof of payment to one of the caller's pending payments."""
        with db.connection() as conn:
            payment = conn.execute("SELECT user_id, status FROM payments WHERE id = ?", (payment_id,)).fetchone()
            if not payment:
                raise NotFoundError("Payment not found")
            if payment["user_id"] != user_id:
                raise ForbiddenError("You can only update your own payments")
            if payment["status"] != PaymentStatus.PENDING.value:
                raise ValueError("Proof can only be attached to a pending payment")
            conn.execute(
                "UPDATE payments SET proof_url = ?, notes = COALESCE(?, notes), "
                "updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (proof_url, notes, payment_id),
            )
        await ActivityService.record(
            db,
            user_id,
            ActivityType.PAYMENT_PROOF_SUBMITTED.value,
            f"Submitted proof for payment {payment_id}",
            resource_type="payment",
            resource_id=payment_id,
        )
        return await cls.get_payment(db, payment_id)
