"""
Enumerated fields and status transition tables.

Every status column in the store is backed by one of the ``str`` enums
below.  Statuses that admins move through a lifecycle (payments,
interview submissions, queries and messages) are additionally guarded
by a ``StateMachine`` so that, for example, a refunded payment cannot
be put back to pending.
"""

from enum import Enum
from typing import Dict, FrozenSet, Type

from .errors import InvalidStatusError, InvalidTransitionError


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


ADMIN_ROLES = (UserRole.ADMIN.value, UserRole.SUPER_ADMIN.value)


class EntityStatus(str, Enum):
    """Lifecycle of events and trips."""

    ACTIVE = "active"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class InterviewState(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    REJECTED = "rejected"
    REFUNDED = "refunded"


# Payment status as mirrored on memberships; free registrations never
# get a Payment record.
NOT_REQUIRED = "not_required"


class PaymentType(str, Enum):
    EVENT = "event"
    TRIP = "trip"
    INTERVIEW = "interview"
    MEMBERSHIP = "membership"


class SubmissionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class QueryStatus(str, Enum):
    NEW = "new"
    OPEN = "open"
    ANSWERED = "answered"
    CLOSED = "closed"


class ContentType(str, Enum):
    PAGE = "page"
    POST = "post"
    LEGAL = "legal"
    FAQ = "faq"


class ContentStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class StateMachine:
    """Transition table over a ``str`` enum.

    ``transitions`` maps each state to the states reachable from it.
    Re-applying the current state is always allowed so admins can edit
    notes without moving the record.
    """

    def __init__(self, name: str, states: Type[Enum], transitions: Dict[Enum, FrozenSet[Enum]]) -> None:
        self.name = name
        self.states = states
        self.transitions = transitions

    def parse(self, value: str) -> Enum:
        """Return the enum member for ``value`` or raise ``InvalidStatusError``."""
        try:
            return self.states(value)
        except ValueError:
            allowed = ", ".join(s.value for s in self.states)
            raise InvalidStatusError(f"Invalid {self.name} status '{value}'. Allowed: {allowed}") from None

    def can_transition(self, current: str, new: str) -> bool:
        current_state = self.states(current)
        new_state = self.states(new)
        if current_state == new_state:
            return True
        return new_state in self.transitions.get(current_state, frozenset())

    def check(self, current: str, new: str) -> Enum:
        """Validate ``current -> new`` and return the new state."""
        new_state = self.parse(new)
        if not self.can_transition(current, new_state.value):
            raise InvalidTransitionError(
                f"Cannot change {self.name} status from '{current}' to '{new_state.value}'"
            )
        return new_state


PAYMENT_STATES = StateMachine(
    "payment",
    PaymentStatus,
    {
        PaymentStatus.PENDING: frozenset({PaymentStatus.COMPLETED, PaymentStatus.REJECTED}),
        PaymentStatus.REJECTED: frozenset({PaymentStatus.PENDING}),
        PaymentStatus.COMPLETED: frozenset({PaymentStatus.REFUNDED}),
        PaymentStatus.REFUNDED: frozenset(),
    },
)

SUBMISSION_STATES = StateMachine(
    "submission",
    SubmissionStatus,
    {
        SubmissionStatus.PENDING: frozenset(
            {SubmissionStatus.APPROVED, SubmissionStatus.REJECTED, SubmissionStatus.CANCELLED}
        ),
        SubmissionStatus.APPROVED: frozenset({SubmissionStatus.COMPLETED, SubmissionStatus.CANCELLED}),
        SubmissionStatus.REJECTED: frozenset({SubmissionStatus.PENDING}),
        SubmissionStatus.COMPLETED: frozenset(),
        SubmissionStatus.CANCELLED: frozenset(),
    },
)

QUERY_STATES = StateMachine(
    "query",
    QueryStatus,
    {
        QueryStatus.NEW: frozenset({QueryStatus.OPEN, QueryStatus.ANSWERED, QueryStatus.CLOSED}),
        QueryStatus.OPEN: frozenset({QueryStatus.ANSWERED, QueryStatus.CLOSED}),
        QueryStatus.ANSWERED: frozenset({QueryStatus.OPEN, QueryStatus.CLOSED}),
        QueryStatus.CLOSED: frozenset({QueryStatus.OPEN}),
    },
)
