"""Volunteer registration ORM model."""
import uuid
import enum
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from community_events.database import Base


class VolunteerStatus(str, enum.Enum):
    pending = "PENDING"
    approved = "APPROVED"
    rejected = "REJECTED"


class Volunteer(Base):
    __tablename__ = "volunteers"
    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_volunteers_event_user"),)

    volunteer_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.event_id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, index=True)
    role_description = Column(Text, nullable=True)
    status = Column(SAEnum(VolunteerStatus), nullable=False, default=VolunteerStatus.pending)
    registered_at = Column(DateTime(timezone=True), server_default=func.now())
    notes = Column(Text, nullable=True)

    event = relationship("Event", back_populates="volunteers")
    user = relationship("User")
