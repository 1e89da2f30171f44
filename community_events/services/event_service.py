"""Event lifecycle engine.

Responsibilities:
- Authorization predicate: only the organizer of record or an admin may
  edit, delete or otherwise manage an event
- Creation, editing and activation toggles
- Registration window evaluation
- Atomic cascading delete of an event with its RSVPs and volunteers
- Purge of completed events for the cleanup scheduler
- Read-side queries (active, upcoming, category, location, search, ...)
"""
import logging
from datetime import datetime, timezone
from typing import Optional, Any

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, Query

from community_events.database import transaction
from community_events.exceptions import NotFoundError, PermissionDeniedError, ValidationFailedError
from community_events.models.event import Event, EventCategory
from community_events.models.rsvp import RSVP
from community_events.models.user import User, UserRole
from community_events.models.volunteer import Volunteer

logger = logging.getLogger(__name__)

# Fields an organizer may overwrite after creation
EDITABLE_FIELDS = (
    "title",
    "description",
    "category",
    "location",
    "start_time_utc",
    "end_time_utc",
    "max_participants",
    "requires_approval",
)

_DATETIME_FIELDS = ("start_time_utc", "end_time_utc", "registration_deadline_utc")

# Editable columns that must never be cleared
_REQUIRED_FIELDS = ("title", "category", "location", "start_time_utc", "requires_approval")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize to an aware UTC datetime; naive values are taken as UTC.

    SQLite hands back naive datetimes even for timezone-aware columns.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _event_snapshot(event: Event) -> dict[str, Any]:
    """Serialize the identifying fields of an event for logs and purge results."""
    end = as_utc(event.end_time_utc)
    return {
        "event_id": event.event_id,
        "title": event.title,
        "end_time_utc": end.isoformat() if end else None,
    }


def can_manage_event(actor: User, event: Event) -> bool:
    """The organizer of record and admins may manage an event."""
    return actor.role == UserRole.admin or event.organizer_id == actor.user_id


def _check_authorization(event: Event, actor: User) -> None:
    if not can_manage_event(actor, event):
        raise PermissionDeniedError(
            "Only the organizer or an admin may modify this event",
            detail=f"User {actor.user_id} cannot manage event {event.event_id}",
        )


def get_event(db: Session, event_id: str) -> Event:
    event = db.query(Event).filter(Event.event_id == event_id).first()
    if not event:
        raise NotFoundError("Event not found", detail=f"No event with id {event_id}")
    return event


def create_event(db: Session, draft: dict[str, Any], organizer: User) -> Event:
    """Persist a new active event owned by ``organizer``.

    Start, end and deadline are stored as given; their relative order is not
    checked.
    """
    if organizer.role not in (UserRole.organizer, UserRole.admin):
        raise PermissionDeniedError("Only organizers can create events")

    values = dict(draft)
    for field in _DATETIME_FIELDS:
        if field in values:
            values[field] = as_utc(values[field])

    with transaction(db):
        event = Event(
            **values,
            organizer_id=organizer.user_id,
            is_active=True,
            created_at=utcnow(),
        )
        db.add(event)
    db.refresh(event)
    logger.info("Created event '%s' (%s) by organizer %s", event.title, event.event_id, organizer.user_id)
    return event


def update_event(db: Session, event_id: str, patch: dict[str, Any], actor: User) -> Event:
    """Overwrite editable fields of an event the actor manages."""
    event = get_event(db, event_id)
    _check_authorization(event, actor)
    cleared = sorted(f for f in _REQUIRED_FIELDS if f in patch and patch[f] is None)
    if cleared:
        raise ValidationFailedError(
            "Required event fields cannot be cleared",
            detail=f"null given for: {', '.join(cleared)}",
        )

    with transaction(db):
        for field, value in patch.items():
            if field not in EDITABLE_FIELDS:
                continue
            if field in _DATETIME_FIELDS:
                value = as_utc(value)
            setattr(event, field, value)
    db.refresh(event)
    logger.info("Updated event %s by %s (fields: %s)", event_id, actor.user_id, ", ".join(sorted(patch)))
    return event


def _set_active(db: Session, event_id: str, active: bool) -> Event:
    event = get_event(db, event_id)
    with transaction(db):
        event.is_active = active
    db.refresh(event)
    logger.info("%s event %s", "Activated" if active else "Deactivated", event_id)
    return event


def activate_event(db: Session, event_id: str) -> Event:
    """Mark an event active; a past end time does not block reactivation."""
    return _set_active(db, event_id, True)


def deactivate_event(db: Session, event_id: str) -> Event:
    return _set_active(db, event_id, False)


def _delete_events_cascade(db: Session, event_ids: list[str]) -> int:
    """Delete registrations, then the events themselves.

    Must run inside a transaction. Rows already gone are skipped, so repeating
    the call is a no-op.
    """
    if not event_ids:
        return 0
    db.query(RSVP).filter(RSVP.event_id.in_(event_ids)).delete(synchronize_session=False)
    db.query(Volunteer).filter(Volunteer.event_id.in_(event_ids)).delete(synchronize_session=False)
    return db.query(Event).filter(Event.event_id.in_(event_ids)).delete(synchronize_session=False)


def delete_event(db: Session, event_id: str, actor: User) -> None:
    event = get_event(db, event_id)
    _check_authorization(event, actor)

    with transaction(db):
        _delete_events_cascade(db, [event.event_id])
    logger.info("Deleted event %s by %s", event_id, actor.user_id)


def is_registration_closed(event: Event, reference_time: Optional[datetime] = None) -> bool:
    """True once ``reference_time`` reaches the deadline; no deadline never closes."""
    deadline = as_utc(event.registration_deadline_utc)
    if deadline is None:
        return False
    reference_time = as_utc(reference_time) or utcnow()
    return reference_time >= deadline


def purge_completed_before(db: Session, cutoff: datetime) -> list[dict[str, Any]]:
    """Delete every event whose end time is strictly before ``cutoff``.

    Returns snapshots of the deleted events. Events without an end time are
    never purged.
    """
    cutoff = as_utc(cutoff)
    with transaction(db):
        expired = (
            db.query(Event)
            .filter(Event.end_time_utc.isnot(None), Event.end_time_utc < cutoff)
            .all()
        )
        snapshots = [_event_snapshot(e) for e in expired]
        _delete_events_cascade(db, [s["event_id"] for s in snapshots])
    if snapshots:
        logger.info("Purged %d events completed before %s", len(snapshots), cutoff.isoformat())
    return snapshots


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
def _active_events(db: Session) -> Query:
    return db.query(Event).filter(Event.is_active.is_(True))


def _contains(column, text: str):
    return func.lower(column).like(f"%{text.lower()}%")


def filter_events(
    db: Session,
    category: Optional[EventCategory] = None,
    location: Optional[str] = None,
    search: Optional[str] = None,
    organizer_id: Optional[str] = None,
    start_after: Optional[datetime] = None,
    start_before: Optional[datetime] = None,
    upcoming: bool = False,
    pending_approval: bool = False,
    include_inactive: bool = False,
    now: Optional[datetime] = None,
) -> list[Event]:
    """Compose the listing filters; results are ordered by start time."""
    query = db.query(Event) if include_inactive else _active_events(db)
    if category:
        query = query.filter(Event.category == category)
    if location:
        query = query.filter(_contains(Event.location, location))
    if search:
        query = query.filter(
            or_(
                _contains(Event.title, search),
                _contains(Event.description, search),
                _contains(Event.location, search),
            )
        )
    if organizer_id:
        query = query.filter(Event.organizer_id == organizer_id)
    if start_after:
        query = query.filter(Event.start_time_utc >= as_utc(start_after))
    if start_before:
        query = query.filter(Event.start_time_utc <= as_utc(start_before))
    if upcoming:
        query = query.filter(Event.start_time_utc > (as_utc(now) or utcnow()))
    if pending_approval:
        query = query.filter(Event.requires_approval.is_(True))
    return query.order_by(Event.start_time_utc).all()


def list_active_events(db: Session) -> list[Event]:
    return filter_events(db)


def list_upcoming_events(db: Session, now: Optional[datetime] = None) -> list[Event]:
    return filter_events(db, upcoming=True, now=now)


def list_events_by_category(db: Session, category: EventCategory) -> list[Event]:
    return filter_events(db, category=category)


def list_events_by_location(db: Session, location: str) -> list[Event]:
    return filter_events(db, location=location)


def search_events(db: Session, keyword: str) -> list[Event]:
    return filter_events(db, search=keyword)


def list_events_pending_approval(db: Session) -> list[Event]:
    return filter_events(db, pending_approval=True)


def list_events_by_organizer(db: Session, organizer_id: str) -> list[Event]:
    """All of an organizer's events, inactive ones included."""
    return filter_events(db, organizer_id=organizer_id, include_inactive=True)


def list_events_in_range(db: Session, start: datetime, end: datetime) -> list[Event]:
    return filter_events(db, start_after=start, start_before=end)
