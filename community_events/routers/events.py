"""Event API routes — thin layer over event_service, which owns the lifecycle rules."""
import logging
from typing import Optional
from datetime import datetime
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from community_events.database import get_db
from community_events.dependencies import get_current_actor
from community_events.models.event import EventCategory
from community_events.models.user import User
from community_events.schemas.event import EventCreate, EventUpdate, EventOut, EventSummary
from community_events.services import event_service, registration_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventCreate, actor: User = Depends(get_current_actor), db: Session = Depends(get_db)):
    """Create a new event owned by the calling organizer."""
    return event_service.create_event(db, payload.model_dump(), actor)


@router.get("/", response_model=list[EventOut])
def list_events(
    category: Optional[EventCategory] = Query(None),
    location: Optional[str] = Query(None, description="Case-insensitive substring"),
    q: Optional[str] = Query(None, description="Search title, description and location"),
    organizer_id: Optional[str] = Query(None),
    start_after: Optional[datetime] = Query(None),
    start_before: Optional[datetime] = Query(None),
    upcoming: bool = Query(False),
    pending_approval: bool = Query(False),
    db: Session = Depends(get_db),
):
    """List events with optional filters.

    Only active events are listed, except when filtering by organizer.
    """
    return event_service.filter_events(
        db,
        category=category,
        location=location,
        search=q,
        organizer_id=organizer_id,
        start_after=start_after,
        start_before=start_before,
        upcoming=upcoming,
        pending_approval=pending_approval,
        include_inactive=organizer_id is not None,
    )


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: str, db: Session = Depends(get_db)):
    return event_service.get_event(db, event_id)


@router.get("/{event_id}/summary", response_model=EventSummary)
def get_event_summary(event_id: str, db: Session = Depends(get_db)):
    """Registration counters and whether the registration window has closed."""
    event = event_service.get_event(db, event_id)
    going = registration_service.going_count(db, event_id)
    return EventSummary(
        event_id=event.event_id,
        going_count=going,
        interested_count=registration_service.interested_count(db, event_id),
        approved_volunteers=registration_service.approved_count(db, event_id),
        pending_volunteers=registration_service.pending_count(db, event_id),
        max_participants=event.max_participants,
        is_full=event.max_participants is not None and going >= event.max_participants,
        registration_closed=event_service.is_registration_closed(event),
    )


@router.put("/{event_id}", response_model=EventOut)
def update_event(
    event_id: str,
    payload: EventUpdate,
    actor: User = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Update an event (organizer or admin only)."""
    updates = payload.model_dump(exclude_unset=True)
    return event_service.update_event(db, event_id, updates, actor)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: str, actor: User = Depends(get_current_actor), db: Session = Depends(get_db)):
    """Delete an event together with its RSVPs and volunteer registrations."""
    event_service.delete_event(db, event_id, actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
