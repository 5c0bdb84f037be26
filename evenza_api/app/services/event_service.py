"""
Business logic for events.

Events are the main catalogue of the platform.  Attendees live in the
``event_attendees`` table; ``attendee_count`` on the event row counts
them.  Registration itself is handled by ``RegistrationService``.
"""

from enum import Enum

from .catalogue_service import CatalogueService


class EventField(str, Enum):
    ID = "id"
    TITLE = "title"
    DESCRIPTION = "description"
    LOCATION = "location"
    CATEGORY = "category"
    DATE = "date"
    STATUS = "status"
    IS_PUBLISHED = "is_published"
    IS_FEATURED = "is_featured"
    CREATED_AT = "created_at"


class EventService(CatalogueService):
    """Service for managing events."""

    table = "events"
    label = "Event"
    fields = EventField
    members_table = "event_attendees"
    member_key = "event_id"
    counter = "attendee_count"
    search_columns = ("title", "description", "location", "category")
    bool_columns = ("is_published", "is_featured")
