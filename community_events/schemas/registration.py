"""Pydantic schemas for RSVPs and volunteer registrations."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from community_events.models.rsvp import RSVPStatus
from community_events.models.volunteer import VolunteerStatus


class RSVPSubmit(BaseModel):
    status: RSVPStatus
    team_name: Optional[str] = None
    team_size: Optional[int] = None  # range checked by the coordinator for GROUP events
    notes: Optional[str] = None


class RSVPOut(BaseModel):
    rsvp_id: str
    event_id: str
    user_id: str
    status: RSVPStatus
    responded_at: Optional[datetime] = None
    notes: Optional[str] = None
    team_name: Optional[str] = None
    team_size: Optional[int] = None

    model_config = {"from_attributes": True}


class VolunteerRegister(BaseModel):
    role_description: str
    notes: Optional[str] = None


class VolunteerRoleUpdate(BaseModel):
    role_description: str


class VolunteerDecision(BaseModel):
    status: VolunteerStatus


class VolunteerOut(BaseModel):
    volunteer_id: str
    event_id: str
    user_id: str
    role_description: Optional[str] = None
    status: VolunteerStatus
    registered_at: Optional[datetime] = None
    notes: Optional[str] = None

    model_config = {"from_attributes": True}
