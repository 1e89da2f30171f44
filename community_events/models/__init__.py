"""ORM models; importing this package registers every table on Base.metadata."""
from community_events.models.user import User, UserRole
from community_events.models.event import Event, EventCategory, ParticipationMode
from community_events.models.rsvp import RSVP, RSVPStatus
from community_events.models.volunteer import Volunteer, VolunteerStatus

__all__ = [
    "User",
    "UserRole",
    "Event",
    "EventCategory",
    "ParticipationMode",
    "RSVP",
    "RSVPStatus",
    "Volunteer",
    "VolunteerStatus",
]
