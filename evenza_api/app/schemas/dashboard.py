"""Aggregates shown on the admin and user dashboards."""

from typing import List

from pydantic import BaseModel

from .activity import ActivityRead
from .event import EventRead
from .interview import InterviewRead, InterviewSubmissionRead
from .registration import RegistrationRead
from .trip import TripRead
from .user import UserRead


class AdminTotals(BaseModel):
    users: int
    events: int
    trips: int
    interviews: int
    payments: int
    pending_payments: int
    messages: int
    new_messages: int
    queries: int
    revenue: float


class AdminDashboard(BaseModel):
    totals: AdminTotals
    recent_activity: List[ActivityRead]


class UserStats(BaseModel):
    events: int
    trips: int
    interviews: int
    queries: int


class UserDashboard(BaseModel):
    user: UserRead
    stats: UserStats
    registered_events: List[RegistrationRead]
    registered_trips: List[RegistrationRead]
    interview_submissions: List[InterviewSubmissionRead]
    available_events: List[EventRead]
    available_trips: List[TripRead]
    available_interviews: List[InterviewRead]
