"""
Admin payment endpoints.

Payments move through ``pending -> completed/rejected``,
``rejected -> pending`` and ``completed -> refunded``.  Unknown
statuses and forbidden transitions are rejected with 400 and leave
the record unchanged.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from ....core.db import Database, get_db
from ....core.errors import to_http
from ....core.security import require_admin
from ....schemas.common import Page
from ....schemas.payment import PaymentRead, PaymentStatusUpdate
from ....services.payment_service import PaymentService

router = APIRouter()


@router.get("/", response_model=Page[PaymentRead])
async def list_payments(
    status_param: Optional[str] = Query(None, alias="status"),
    payment_type: Optional[str] = Query(None, alias="type"),
    user_id: Optional[int] = None,
    search: Optional[str] = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Database = Depends(get_db),
) -> Page[PaymentRead]:
    try:
        items, total = await PaymentService.list_payments(
            db,
            user_id=user_id,
            status=status_param,
            payment_type=payment_type,
            search=search,
            limit=limit,
            offset=offset,
        )
    except ValueError as e:
        raise to_http(e)
    return Page[PaymentRead](items=items, total=total, limit=limit, offset=offset)


@router.get("/{payment_id}", response_model=PaymentRead)
async def get_payment(payment_id: int = Path(..., description="Payment ID"), db: Database = Depends(get_db)) -> PaymentRead:
    try:
        item = await PaymentService.get_payment(db, payment_id)
    except ValueError as e:
        raise to_http(e)
    return PaymentRead(**item)


@router.put("/{payment_id}/status", response_model=PaymentRead)
async def update_payment_status(
    data: PaymentStatusUpdate,
    payment_id: int = Path(..., description="Payment ID"),
    current_user: dict = Depends(require_admin),
    db: Database = Depends(get_db),
) -> PaymentRead:
    """Change the payment status, stamping the verifier and time."""
    try:
        payment = await PaymentService.update_status(db, payment_id, data.status, current_user, data.notes)
    except ValueError as e:
        raise to_http(e)
    return PaymentRead(**payment)
