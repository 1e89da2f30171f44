"""Pydantic schemas for Events."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from community_events.models.event import EventCategory, ParticipationMode


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    category: EventCategory = EventCategory.other
    location: str = Field(..., min_length=1, max_length=500)
    start_time_utc: datetime
    end_time_utc: Optional[datetime] = None
    registration_deadline_utc: Optional[datetime] = None
    max_participants: Optional[int] = Field(None, ge=1)
    participation_mode: ParticipationMode = ParticipationMode.individual
    group_size: Optional[int] = Field(None, ge=1)
    requires_approval: bool = False


class EventUpdate(BaseModel):
    """Editable fields; organizer and participation mode are fixed at creation."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[EventCategory] = None
    location: Optional[str] = Field(None, min_length=1, max_length=500)
    start_time_utc: Optional[datetime] = None
    end_time_utc: Optional[datetime] = None
    max_participants: Optional[int] = Field(None, ge=1)
    requires_approval: Optional[bool] = None


class EventOut(BaseModel):
    event_id: str
    title: str
    description: Optional[str] = None
    category: EventCategory
    location: str
    start_time_utc: datetime
    end_time_utc: Optional[datetime] = None
    registration_deadline_utc: Optional[datetime] = None
    organizer_id: str
    max_participants: Optional[int] = None
    participation_mode: ParticipationMode
    group_size: Optional[int] = None
    requires_approval: bool
    is_active: bool
    created_at: Optional[datetime] = None
    current_participants: int
    is_full: bool

    model_config = {"from_attributes": True}


class EventSummary(BaseModel):
    """Registration counters and window state for one event."""

    event_id: str
    going_count: int
    interested_count: int
    approved_volunteers: int
    pending_volunteers: int
    max_participants: Optional[int] = None
    is_full: bool
    registration_closed: bool


class PurgedEvent(BaseModel):
    event_id: str
    title: str
    end_time_utc: Optional[datetime] = None
