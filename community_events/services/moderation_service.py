"""Moderation gateway: admin-only operations over events and the user directory.

Callers are assumed authenticated; this layer checks the ADMIN role before
delegating to the lifecycle engine or the user directory.
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from community_events.database import transaction
from community_events.exceptions import PermissionDeniedError, ValidationFailedError
from community_events.models.event import Event
from community_events.models.rsvp import RSVP, RSVPStatus
from community_events.models.user import User, UserRole
from community_events.models.volunteer import Volunteer, VolunteerStatus
from community_events.services import event_service, user_service

logger = logging.getLogger(__name__)

EVENT_STATES = ("all", "active", "inactive", "pending", "upcoming")


def require_admin(actor: User) -> None:
    if actor.role != UserRole.admin:
        raise PermissionDeniedError("Admin role required", detail=f"User {actor.user_id} is not an admin")


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
def _set_enabled(db: Session, actor: User, user_id: str, enabled: bool) -> User:
    require_admin(actor)
    user = user_service.get_user(db, user_id)
    with transaction(db):
        user.enabled = enabled
    db.refresh(user)
    logger.info("Admin %s %s user %s", actor.user_id, "enabled" if enabled else "disabled", user_id)
    return user


def enable_user(db: Session, actor: User, user_id: str) -> User:
    return _set_enabled(db, actor, user_id, True)


def disable_user(db: Session, actor: User, user_id: str) -> User:
    return _set_enabled(db, actor, user_id, False)


def change_user_role(db: Session, actor: User, user_id: str, role: UserRole) -> User:
    require_admin(actor)
    user = user_service.get_user(db, user_id)
    previous = user.role
    with transaction(db):
        user.role = role
    db.refresh(user)
    logger.info("Admin %s changed role of user %s: %s -> %s", actor.user_id, user_id, previous.value, role.value)
    return user


def list_users(db: Session, actor: User, role: Optional[UserRole] = None, enabled: Optional[bool] = None,
               search: Optional[str] = None) -> list[User]:
    require_admin(actor)
    return user_service.list_users(db, role=role, enabled=enabled, search=search)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------
def list_events(db: Session, actor: User, state: str = "all", now: Optional[datetime] = None) -> list[Event]:
    require_admin(actor)
    if state == "all":
        return db.query(Event).order_by(Event.start_time_utc).all()
    if state == "active":
        return event_service.list_active_events(db)
    if state == "inactive":
        return db.query(Event).filter(Event.is_active.is_(False)).order_by(Event.start_time_utc).all()
    if state == "pending":
        return event_service.list_events_pending_approval(db)
    if state == "upcoming":
        return event_service.list_upcoming_events(db, now=now)
    raise ValidationFailedError("Unknown event state", detail=f"state must be one of {', '.join(EVENT_STATES)}")


def activate_event(db: Session, actor: User, event_id: str) -> Event:
    require_admin(actor)
    return event_service.activate_event(db, event_id)


def deactivate_event(db: Session, actor: User, event_id: str) -> Event:
    require_admin(actor)
    return event_service.deactivate_event(db, event_id)


def delete_event(db: Session, actor: User, event_id: str) -> None:
    require_admin(actor)
    event_service.delete_event(db, event_id, actor)


def purge_events(db: Session, actor: User, cutoff: Optional[datetime] = None,
                 retention: timedelta = timedelta(0)) -> tuple[datetime, list[dict[str, Any]]]:
    """Manually run the cleanup purge; the cutoff defaults to now minus retention."""
    require_admin(actor)
    cutoff = event_service.as_utc(cutoff) or (event_service.utcnow() - retention)
    deleted = event_service.purge_completed_before(db, cutoff)
    logger.info("Admin %s purged %d events before %s", actor.user_id, len(deleted), cutoff.isoformat())
    return cutoff, deleted


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------
def get_statistics(db: Session, actor: User, now: Optional[datetime] = None) -> dict[str, Any]:
    require_admin(actor)
    now = event_service.as_utc(now) or event_service.utcnow()

    by_role = {role.value: 0 for role in UserRole}
    for role, count in db.query(User.role, func.count(User.user_id)).group_by(User.role).all():
        by_role[role.value] = count
    users_total = sum(by_role.values())
    users_enabled = db.query(func.count(User.user_id)).filter(User.enabled.is_(True)).scalar()

    events_total = db.query(func.count(Event.event_id)).scalar()
    events_active = db.query(func.count(Event.event_id)).filter(Event.is_active.is_(True)).scalar()
    events_upcoming = (
        db.query(func.count(Event.event_id))
        .filter(Event.is_active.is_(True), Event.start_time_utc > now)
        .scalar()
    )
    events_pending = (
        db.query(func.count(Event.event_id))
        .filter(Event.is_active.is_(True), Event.requires_approval.is_(True))
        .scalar()
    )

    return {
        "users_total": users_total,
        "users_by_role": by_role,
        "users_enabled": users_enabled,
        "users_disabled": users_total - users_enabled,
        "events_total": events_total,
        "events_active": events_active,
        "events_inactive": events_total - events_active,
        "events_upcoming": events_upcoming,
        "events_pending_approval": events_pending,
        "rsvps_going": db.query(func.count(RSVP.rsvp_id)).filter(RSVP.status == RSVPStatus.going).scalar(),
        "volunteers_pending": (
            db.query(func.count(Volunteer.volunteer_id))
            .filter(Volunteer.status == VolunteerStatus.pending)
            .scalar()
        ),
    }
