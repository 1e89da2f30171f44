"""User directory ORM model."""
import uuid
import enum
from sqlalchemy import Column, String, Boolean, DateTime, Enum as SAEnum
from sqlalchemy.sql import func
from community_events.database import Base


class UserRole(str, enum.Enum):
    participant = "PARTICIPANT"
    organizer = "ORGANIZER"
    admin = "ADMIN"


class User(Base):
    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), nullable=False, unique=True)
    name = Column(String(100), nullable=False)
    phone = Column(String(50), nullable=True)
    role = Column(SAEnum(UserRole), nullable=False, default=UserRole.participant)
    enabled = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
