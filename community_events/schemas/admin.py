"""Pydantic schemas for the moderation endpoints."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from community_events.schemas.event import PurgedEvent


class AdminStats(BaseModel):
    users_total: int
    users_by_role: dict[str, int]
    users_enabled: int
    users_disabled: int
    events_total: int
    events_active: int
    events_inactive: int
    events_upcoming: int
    events_pending_approval: int
    rsvps_going: int
    volunteers_pending: int


class CleanupRequest(BaseModel):
    cutoff: Optional[datetime] = None


class CleanupResult(BaseModel):
    cutoff: datetime
    deleted_count: int
    deleted: list[PurgedEvent]
