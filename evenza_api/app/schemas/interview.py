"""
Pydantic models for interview opportunities and applications.

An interview lists the ``positions`` on offer; users apply with an
``InterviewSubmissionCreate`` and admins review the resulting
submission through ``SubmissionReview``.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..core.states import InterviewState


class InterviewBase(BaseModel):
    title: str = Field(..., min_length=1, example="Campus Placement Drive")
    company: str = Field(..., example="Acme Corp")
    description: str = Field(..., example="Interviews for graduate roles")
    date: str = Field(..., example="2026-03-10")
    location: str = Field(..., example="Placement Cell")
    positions: List[str] = Field(default_factory=list, example=["Backend Engineer"])
    slots: Optional[int] = Field(None, ge=1, description="Maximum applications; unlimited when empty")
    image: Optional[str] = None
    is_published: bool = True
    status: InterviewState = InterviewState.ACTIVE


class InterviewCreate(InterviewBase):
    pass


class InterviewUpdate(BaseModel):
    """All fields are optional; only provided fields will be updated."""

    title: str | None = None
    company: str | None = None
    description: str | None = None
    date: str | None = None
    location: str | None = None
    positions: List[str] | None = None
    slots: int | None = Field(None, ge=1)
    image: str | None = None
    is_published: bool | None = None
    status: InterviewState | None = None


class InterviewRead(InterviewBase):
    id: int
    registrations: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }


class InterviewSubmissionCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = ""
    position: str = Field(..., min_length=1, example="Backend Engineer")
    education: Optional[str] = ""
    experience: Optional[str] = ""
    cover_letter: Optional[str] = ""
    resume: Optional[str] = ""
    portfolio_url: Optional[str] = ""
    linkedin_url: Optional[str] = ""
    github_url: Optional[str] = ""
    availability: Optional[str] = ""
    additional_info: Optional[str] = ""


class InterviewSubmissionRead(BaseModel):
    id: int
    user_id: int
    interview_id: int
    interview_title: Optional[str] = None
    company: Optional[str] = None
    name: str
    email: str
    phone: Optional[str] = ""
    position: Optional[str] = ""
    education: Optional[str] = ""
    experience: Optional[str] = ""
    cover_letter: Optional[str] = ""
    resume: Optional[str] = ""
    portfolio_url: Optional[str] = ""
    linkedin_url: Optional[str] = ""
    github_url: Optional[str] = ""
    availability: Optional[str] = ""
    additional_info: Optional[str] = ""
    status: str
    admin_notes: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class SubmissionReview(BaseModel):
    """Admin decision on an application.

    ``status`` is validated against the submission state machine by the
    service so that unknown values produce a 400 rather than a 422.
    """

    status: str = Field(..., example="approved")
    admin_notes: Optional[str] = None


class InterviewDetail(InterviewRead):
    submissions: List[InterviewSubmissionRead] = []
