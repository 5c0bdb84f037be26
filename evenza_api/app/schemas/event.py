"""
Pydantic models for event data.

``EventBase`` contains shared fields; ``EventCreate`` extends it for
requests and ``EventRead`` adds the identifier and the attendee
counter for responses.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..core.states import EntityStatus


class EventBase(BaseModel):
    title: str = Field(..., min_length=1, example="Spring Hackathon")
    description: str = Field(..., example="Twenty-four hours of building things")
    date: str = Field(..., example="2026-04-18")
    time: Optional[str] = Field("", example="10:00")
    location: Optional[str] = Field("", example="Main Hall")
    category: Optional[str] = Field("Other", example="Technical")
    price: float = Field(0, ge=0, example=0)
    max_attendees: int = Field(100, ge=1, example=100)
    is_featured: bool = False
    image: Optional[str] = None
    is_published: bool = True
    status: EntityStatus = EntityStatus.ACTIVE


class EventCreate(EventBase):
    """Schema for creating an event."""
    pass


class EventUpdate(BaseModel):
    """Schema for updating an event.

    All fields are optional; only provided fields will be updated.
    """
    title: str | None = None
    description: str | None = None
    date: str | None = None
    time: str | None = None
    location: str | None = None
    category: str | None = None
    price: float | None = Field(None, ge=0)
    max_attendees: int | None = Field(None, ge=1)
    is_featured: bool | None = None
    image: str | None = None
    is_published: bool | None = None
    status: EntityStatus | None = None


class EventRead(EventBase):
    """Schema for reading an event from the API."""

    id: int
    attendee_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }


class AttendeeRead(BaseModel):
    user_id: int
    name: str
    email: str
    phone: Optional[str] = ""
    tickets: int = 1
    payment_status: str
    special_requirements: Optional[str] = ""
    registered_at: Optional[datetime] = None


class EventDetail(EventRead):
    attendees: List[AttendeeRead] = []
