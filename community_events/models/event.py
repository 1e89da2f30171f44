"""Event ORM model."""
import uuid
import enum
from sqlalchemy import Column, String, Text, DateTime, Integer, Boolean, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from community_events.database import Base


class EventCategory(str, enum.Enum):
    workshop = "WORKSHOP"
    hackathon = "HACKATHON"
    donation_drive = "DONATION_DRIVE"
    meetup = "MEETUP"
    conference = "CONFERENCE"
    seminar = "SEMINAR"
    other = "OTHER"


class ParticipationMode(str, enum.Enum):
    individual = "INDIVIDUAL"
    group = "GROUP"


class Event(Base):
    __tablename__ = "events"

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(SAEnum(EventCategory), nullable=False, default=EventCategory.other)
    location = Column(String(500), nullable=False)
    start_time_utc = Column(DateTime(timezone=True), nullable=False)
    end_time_utc = Column(DateTime(timezone=True), nullable=True, index=True)
    registration_deadline_utc = Column(DateTime(timezone=True), nullable=True)
    organizer_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    max_participants = Column(Integer, nullable=True)
    participation_mode = Column(SAEnum(ParticipationMode), nullable=False, default=ParticipationMode.individual)
    group_size = Column(Integer, nullable=True)
    requires_approval = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # No ORM cascade: registrations are removed by explicit bulk deletes
    # in event_service so the purge and delete paths share one code path.
    rsvps = relationship("RSVP", back_populates="event", passive_deletes=True)
    volunteers = relationship("Volunteer", back_populates="event", passive_deletes=True)

    @property
    def current_participants(self) -> int:
        """GOING RSVPs; one row is one unit of capacity regardless of team size."""
        from community_events.models.rsvp import RSVPStatus

        return sum(1 for r in self.rsvps if r.status == RSVPStatus.going)

    @property
    def is_full(self) -> bool:
        return self.max_participants is not None and self.current_participants >= self.max_participants
