"""
Pydantic models for payment data.

A payment is created by the registration flow whenever a priced event
or trip is booked.  Users attach a proof of transfer; admins move the
record through its lifecycle with ``PaymentStatusUpdate``.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PaymentRead(BaseModel):
    id: int
    user_id: int
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    payment_type: str
    related_id: int
    related_title: Optional[str] = None
    amount: float
    status: str
    proof_url: Optional[str] = None
    notes: Optional[str] = None
    verified_by: Optional[int] = None
    verified_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }


class PaymentStatusUpdate(BaseModel):
    # Plain string: the payment state machine rejects unknown values
    # with a 400 and leaves the record untouched.
    status: str = Field(..., example="completed")
    notes: Optional[str] = None


class PaymentProof(BaseModel):
    proof_url: str = Field(..., min_length=1, example="https://cdn.example.com/payments/receipt.png")
    notes: Optional[str] = None
