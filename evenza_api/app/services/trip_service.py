"""Business logic for trips.  Participants live in ``trip_participants``."""

from enum import Enum

from .catalogue_service import CatalogueService


class TripField(str, Enum):
    ID = "id"
    TITLE = "title"
    DESCRIPTION = "description"
    LOCATION = "location"
    DATE = "date"
    STATUS = "status"
    IS_PUBLISHED = "is_published"
    CREATED_AT = "created_at"


class TripService(CatalogueService):
    table = "trips"
    label = "Trip"
    fields = TripField
    members_table = "trip_participants"
    member_key = "trip_id"
    counter = "enrollments"
    nullable_columns = ("image", "itinerary", "requirements")
