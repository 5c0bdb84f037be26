"""Support queries submitted by users and the admin message inbox."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class QueryCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    subject: str = Field(..., min_length=1, example="Refund for the hackathon")
    message: str = Field(..., min_length=1)


class QueryRead(BaseModel):
    id: int
    user_id: int
    name: str
    email: str
    subject: str
    message: str
    status: str
    response: Optional[str] = None
    responded_by: Optional[int] = None
    responded_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class QueryResponse(BaseModel):
    response: str = Field(..., min_length=1)


class MessageRead(BaseModel):
    id: int
    user_id: Optional[int] = None
    query_id: Optional[int] = None
    name: str
    email: str
    subject: str
    message: str
    status: str
    notes: Optional[str] = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MessageUpdate(BaseModel):
    status: Optional[str] = None
    notes: Optional[str] = None
