from app.models.user import User, UserPreferences
from app.models.location import Location
from app.models.trip import (
    Comment,
    ProposedGuest,
    Trip,
    TripPreference,
    TripRSVP,
    trip_locations,
)

__all__ = [
    "Comment",
    "Location",
    "ProposedGuest",
    "Trip",
    "TripPreference",
    "TripRSVP",
    "User",
    "UserPreferences",
    "trip_locations",
]
