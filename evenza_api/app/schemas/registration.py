"""Bodies of the registration, enrollment and application routes."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class EventRegistrationCreate(BaseModel):
    tickets: int = Field(1, ge=1, le=10, example=1)
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = ""
    special_requirements: Optional[str] = ""


class TripEnrollmentCreate(BaseModel):
    phone: Optional[str] = ""
    emergency_contact: Optional[str] = ""
    special_requirements: Optional[str] = ""


class RegistrationRead(BaseModel):
    """A row of the user's mirrored registrations."""

    id: int
    kind: str
    entity_id: int
    title: Optional[str] = None
    date: Optional[str] = None
    location: Optional[str] = None
    price: Optional[float] = None
    submission_id: Optional[int] = None
    tickets: int = 1
    payment_status: str
    status: str
    registered_at: Optional[datetime] = None


class RegistrationResponse(BaseModel):
    success: bool = True
    message: str
    registration: RegistrationRead
    payment_id: Optional[int] = None
    submission_id: Optional[int] = None
