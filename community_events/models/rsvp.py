"""RSVP ORM model."""
import uuid
import enum
from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from community_events.database import Base


class RSVPStatus(str, enum.Enum):
    going = "GOING"
    interested = "INTERESTED"
    not_going = "NOT_GOING"


class RSVP(Base):
    __tablename__ = "rsvps"
    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_rsvps_event_user"),)

    rsvp_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.event_id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, index=True)
    status = Column(SAEnum(RSVPStatus), nullable=False)
    responded_at = Column(DateTime(timezone=True), server_default=func.now())
    notes = Column(Text, nullable=True)
    team_name = Column(String(150), nullable=True)
    team_size = Column(Integer, nullable=True)

    event = relationship("Event", back_populates="rsvps")
    user = relationship("User")
