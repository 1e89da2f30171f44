"""Registration coordinator: RSVPs and volunteer sign-ups.

RSVPs upsert: a repeat submission by the same user overwrites the existing
row. Volunteer registration is insert-only: a repeat attempt is a conflict.
Capacity and the registration deadline are advisory here; neither blocks a
write.
"""
import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from community_events.database import transaction
from community_events.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from community_events.models.event import Event, ParticipationMode
from community_events.models.rsvp import RSVP, RSVPStatus
from community_events.models.user import User
from community_events.models.volunteer import Volunteer, VolunteerStatus
from community_events.services.event_service import can_manage_event, get_event, utcnow
from community_events.services.notification_service import NotificationKind, Notifier

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# RSVP
# ---------------------------------------------------------------------------
def validate_team(event: Event, status: RSVPStatus, team_name: Optional[str], team_size: Optional[int]) -> None:
    """Team details are required when going to a GROUP event."""
    if event.participation_mode != ParticipationMode.group or status != RSVPStatus.going:
        return
    if team_name is None or not team_name.strip():
        raise ValidationFailedError("Team name is required for group events")
    if team_size is None or team_size < 1:
        raise ValidationFailedError("Valid team size is required")
    if event.group_size is not None and team_size > event.group_size:
        raise ValidationFailedError(
            "Team size exceeds the group size limit",
            detail=f"Team size cannot exceed {event.group_size} members",
        )


def _find_rsvp(db: Session, event_id: str, user_id: str) -> Optional[RSVP]:
    return (
        db.query(RSVP)
        .filter(RSVP.event_id == event_id, RSVP.user_id == user_id)
        .first()
    )


def _apply_rsvp(rsvp: RSVP, status: RSVPStatus, team_name, team_size, notes) -> None:
    rsvp.status = status
    rsvp.team_name = team_name.strip() if team_name else None
    rsvp.team_size = team_size
    rsvp.notes = notes
    rsvp.responded_at = utcnow()


def submit_rsvp(
    db: Session,
    event_id: str,
    actor: User,
    status: RSVPStatus,
    team_name: Optional[str] = None,
    team_size: Optional[int] = None,
    notes: Optional[str] = None,
) -> RSVP:
    """Create or overwrite the actor's RSVP for an event."""
    event = get_event(db, event_id)
    validate_team(event, status, team_name, team_size)

    try:
        with transaction(db):
            rsvp = _find_rsvp(db, event_id, actor.user_id)
            if rsvp is None:
                rsvp = RSVP(event_id=event_id, user_id=actor.user_id)
                db.add(rsvp)
            _apply_rsvp(rsvp, status, team_name, team_size, notes)
    except IntegrityError:
        # A concurrent first submission inserted the row; last write wins.
        logger.info("RSVP insert raced for event %s user %s, updating existing row", event_id, actor.user_id)
        with transaction(db):
            rsvp = _find_rsvp(db, event_id, actor.user_id)
            if rsvp is None:
                raise
            _apply_rsvp(rsvp, status, team_name, team_size, notes)
    db.refresh(rsvp)
    logger.info("User %s RSVP'd %s to event %s", actor.user_id, status.value, event_id)
    return rsvp


def get_rsvp(db: Session, event_id: str, user_id: str) -> RSVP:
    rsvp = _find_rsvp(db, event_id, user_id)
    if not rsvp:
        raise NotFoundError("RSVP not found", detail=f"User {user_id} has no RSVP for event {event_id}")
    return rsvp


def remove_rsvp(db: Session, event_id: str, actor: User) -> None:
    rsvp = get_rsvp(db, event_id, actor.user_id)
    with transaction(db):
        db.delete(rsvp)
    logger.info("Removed RSVP of user %s for event %s", actor.user_id, event_id)


def list_event_rsvps(db: Session, event_id: str, status: Optional[RSVPStatus] = None) -> list[RSVP]:
    query = db.query(RSVP).filter(RSVP.event_id == event_id)
    if status:
        query = query.filter(RSVP.status == status)
    return query.order_by(RSVP.responded_at).all()


def list_user_rsvps(db: Session, user_id: str) -> list[RSVP]:
    return db.query(RSVP).filter(RSVP.user_id == user_id).order_by(RSVP.responded_at).all()


def _count_rsvps(db: Session, event_id: str, status: RSVPStatus) -> int:
    return (
        db.query(func.count(RSVP.rsvp_id))
        .filter(RSVP.event_id == event_id, RSVP.status == status)
        .scalar()
    )


def going_count(db: Session, event_id: str) -> int:
    return _count_rsvps(db, event_id, RSVPStatus.going)


def interested_count(db: Session, event_id: str) -> int:
    return _count_rsvps(db, event_id, RSVPStatus.interested)


# ---------------------------------------------------------------------------
# Volunteers
# ---------------------------------------------------------------------------
def _find_volunteer(db: Session, event_id: str, user_id: str) -> Optional[Volunteer]:
    return (
        db.query(Volunteer)
        .filter(Volunteer.event_id == event_id, Volunteer.user_id == user_id)
        .first()
    )


def get_volunteer(db: Session, event_id: str, user_id: str) -> Volunteer:
    volunteer = _find_volunteer(db, event_id, user_id)
    if not volunteer:
        raise NotFoundError(
            "Volunteer registration not found",
            detail=f"User {user_id} is not registered as volunteer for event {event_id}",
        )
    return volunteer


def register_volunteer(
    db: Session,
    event_id: str,
    actor: User,
    role_description: str,
    notifier: Notifier,
    notes: Optional[str] = None,
) -> Volunteer:
    """Insert a PENDING volunteer registration; a second one is a conflict."""
    event = get_event(db, event_id)
    if _find_volunteer(db, event_id, actor.user_id):
        raise ConflictError("User is already registered as volunteer for this event")

    try:
        with transaction(db):
            volunteer = Volunteer(
                event_id=event_id,
                user_id=actor.user_id,
                role_description=role_description,
                status=VolunteerStatus.pending,
                registered_at=utcnow(),
                notes=notes,
            )
            db.add(volunteer)
    except IntegrityError as exc:
        raise ConflictError("User is already registered as volunteer for this event") from exc
    db.refresh(volunteer)
    logger.info("User %s registered as volunteer for event %s", actor.user_id, event_id)
    notifier.notify(actor, NotificationKind.volunteer_registered, event)
    return volunteer


def decide_volunteer(
    db: Session,
    event_id: str,
    user_id: str,
    new_status: VolunteerStatus,
    actor: User,
    notifier: Notifier,
) -> Volunteer:
    """Set a volunteer's status; notify only on a move into APPROVED."""
    event = get_event(db, event_id)
    if not can_manage_event(actor, event):
        raise PermissionDeniedError("Only the organizer or an admin may decide on volunteers")
    volunteer = get_volunteer(db, event_id, user_id)

    previous = volunteer.status
    with transaction(db):
        volunteer.status = new_status
    db.refresh(volunteer)
    logger.info(
        "Volunteer %s for event %s: %s -> %s (by %s)",
        user_id, event_id, previous.value, new_status.value, actor.user_id,
    )
    if new_status == VolunteerStatus.approved and previous != VolunteerStatus.approved:
        notifier.notify(volunteer.user, NotificationKind.volunteer_approved, event)
    return volunteer


def update_volunteer_role(db: Session, event_id: str, actor: User, role_description: str) -> Volunteer:
    volunteer = get_volunteer(db, event_id, actor.user_id)
    with transaction(db):
        volunteer.role_description = role_description
    db.refresh(volunteer)
    logger.info("User %s changed volunteer role for event %s", actor.user_id, event_id)
    return volunteer


def withdraw_volunteer(db: Session, event_id: str, actor: User) -> None:
    volunteer = get_volunteer(db, event_id, actor.user_id)
    with transaction(db):
        db.delete(volunteer)
    logger.info("User %s withdrew volunteer registration for event %s", actor.user_id, event_id)


def list_event_volunteers(db: Session, event_id: str, status: Optional[VolunteerStatus] = None) -> list[Volunteer]:
    query = db.query(Volunteer).filter(Volunteer.event_id == event_id)
    if status:
        query = query.filter(Volunteer.status == status)
    return query.order_by(Volunteer.registered_at).all()


def list_user_volunteering(db: Session, user_id: str) -> list[Volunteer]:
    return db.query(Volunteer).filter(Volunteer.user_id == user_id).order_by(Volunteer.registered_at).all()


def _count_volunteers(db: Session, event_id: str, status: VolunteerStatus) -> int:
    return (
        db.query(func.count(Volunteer.volunteer_id))
        .filter(Volunteer.event_id == event_id, Volunteer.status == status)
        .scalar()
    )


def approved_count(db: Session, event_id: str) -> int:
    return _count_volunteers(db, event_id, VolunteerStatus.approved)


def pending_count(db: Session, event_id: str) -> int:
    return _count_volunteers(db, event_id, VolunteerStatus.pending)
