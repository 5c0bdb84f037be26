"""Pydantic models for trips, the multi-day counterpart of events."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..core.states import EntityStatus


class TripBase(BaseModel):
    title: str = Field(..., min_length=1, example="Himalayan Trek")
    description: str = Field(..., example="Five days in the mountains")
    date: str = Field(..., example="2026-05-02")
    location: str = Field(..., example="Manali")
    price: float = Field(0, ge=0, example=4500)
    spots: int = Field(20, ge=1, example=20)
    itinerary: Optional[str] = None
    requirements: Optional[str] = None
    image: Optional[str] = None
    is_published: bool = True
    status: EntityStatus = EntityStatus.ACTIVE


class TripCreate(TripBase):
    pass


class TripUpdate(BaseModel):
    """All fields are optional; only provided fields will be updated."""

    title: str | None = None
    description: str | None = None
    date: str | None = None
    location: str | None = None
    price: float | None = Field(None, ge=0)
    spots: int | None = Field(None, ge=1)
    itinerary: str | None = None
    requirements: str | None = None
    image: str | None = None
    is_published: bool | None = None
    status: EntityStatus | None = None


class TripRead(TripBase):
    id: int
    enrollments: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }


class ParticipantRead(BaseModel):
    user_id: int
    name: str
    email: str
    phone: Optional[str] = ""
    payment_status: str
    emergency_contact: Optional[str] = ""
    special_requirements: Optional[str] = ""
    enrolled_at: Optional[datetime] = None


class TripDetail(TripRead):
    participants: List[ParticipantRead] = []
