"""Pydantic models for gallery media items and uploads."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..core.states import MediaType


class MediaCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    type: MediaType = MediaType.IMAGE
    url: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, example="events")
    related_event_id: Optional[int] = None
    related_trip_id: Optional[int] = None


class MediaRead(MediaCreate):
    id: int
    uploaded_by: Optional[int] = None
    created_at: Optional[datetime] = None


class UploadResult(BaseModel):
    success: bool = True
    url: str
    key: str
    type: MediaType
    size: int
    content_type: str
