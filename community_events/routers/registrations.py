"""RSVP, volunteer and export routes for a single event."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from community_events.database import get_db
from community_events.dependencies import get_current_actor, get_notifier
from community_events.exceptions import PermissionDeniedError
from community_events.models.event import Event
from community_events.models.rsvp import RSVPStatus
from community_events.models.user import User
from community_events.models.volunteer import VolunteerStatus
from community_events.schemas.registration import (
    RSVPOut,
    RSVPSubmit,
    VolunteerDecision,
    VolunteerOut,
    VolunteerRegister,
    VolunteerRoleUpdate,
)
from community_events.services import event_service, export_service, registration_service
from community_events.services.notification_service import Notifier

logger = logging.getLogger(__name__)
router = APIRouter()


def _managed_event(db: Session, event_id: str, actor: User) -> Event:
    event = event_service.get_event(db, event_id)
    if not event_service.can_manage_event(actor, event):
        raise PermissionDeniedError("Only the organizer or an admin may view registrations")
    return event


# ---------------------------------------------------------------------------
# RSVP
# ---------------------------------------------------------------------------
@router.post("/{event_id}/rsvp", response_model=RSVPOut)
def submit_rsvp(
    event_id: str,
    payload: RSVPSubmit,
    actor: User = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Set or overwrite the caller's RSVP."""
    return registration_service.submit_rsvp(
        db,
        event_id,
        actor,
        payload.status,
        team_name=payload.team_name,
        team_size=payload.team_size,
        notes=payload.notes,
    )


@router.delete("/{event_id}/rsvp", status_code=status.HTTP_204_NO_CONTENT)
def remove_rsvp(event_id: str, actor: User = Depends(get_current_actor), db: Session = Depends(get_db)):
    registration_service.remove_rsvp(db, event_id, actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{event_id}/rsvps/me", response_model=RSVPOut)
def get_my_rsvp(event_id: str, actor: User = Depends(get_current_actor), db: Session = Depends(get_db)):
    return registration_service.get_rsvp(db, event_id, actor.user_id)


@router.get("/{event_id}/rsvps", response_model=list[RSVPOut])
def list_rsvps(
    event_id: str,
    rsvp_status: Optional[RSVPStatus] = Query(None, alias="status"),
    actor: User = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Participants of an event (organizer or admin only)."""
    _managed_event(db, event_id, actor)
    return registration_service.list_event_rsvps(db, event_id, rsvp_status)


# ---------------------------------------------------------------------------
# Volunteers
# ---------------------------------------------------------------------------
@router.post("/{event_id}/volunteers", response_model=VolunteerOut, status_code=status.HTTP_201_CREATED)
def register_volunteer(
    event_id: str,
    payload: VolunteerRegister,
    actor: User = Depends(get_current_actor),
    notifier: Notifier = Depends(get_notifier),
    db: Session = Depends(get_db),
):
    return registration_service.register_volunteer(
        db, event_id, actor, payload.role_description, notifier, notes=payload.notes,
    )


@router.get("/{event_id}/volunteers", response_model=list[VolunteerOut])
def list_volunteers(
    event_id: str,
    volunteer_status: Optional[VolunteerStatus] = Query(None, alias="status"),
    actor: User = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    _managed_event(db, event_id, actor)
    return registration_service.list_event_volunteers(db, event_id, volunteer_status)


@router.get("/{event_id}/volunteers/me", response_model=VolunteerOut)
def get_my_volunteer_registration(
    event_id: str, actor: User = Depends(get_current_actor), db: Session = Depends(get_db)
):
    return registration_service.get_volunteer(db, event_id, actor.user_id)


@router.patch("/{event_id}/volunteers/me", response_model=VolunteerOut)
def update_my_volunteer_role(
    event_id: str,
    payload: VolunteerRoleUpdate,
    actor: User = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    return registration_service.update_volunteer_role(db, event_id, actor, payload.role_description)


@router.delete("/{event_id}/volunteers/me", status_code=status.HTTP_204_NO_CONTENT)
def withdraw_volunteer(event_id: str, actor: User = Depends(get_current_actor), db: Session = Depends(get_db)):
    registration_service.withdraw_volunteer(db, event_id, actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{event_id}/volunteers/{user_id}/decision", response_model=VolunteerOut)
def decide_volunteer(
    event_id: str,
    user_id: str,
    payload: VolunteerDecision,
    actor: User = Depends(get_current_actor),
    notifier: Notifier = Depends(get_notifier),
    db: Session = Depends(get_db),
):
    """Approve, reject or reset a volunteer (organizer or admin only)."""
    return registration_service.decide_volunteer(db, event_id, user_id, payload.status, actor, notifier)


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------
def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/{event_id}/export/participants")
def export_participants(event_id: str, actor: User = Depends(get_current_actor), db: Session = Depends(get_db)):
    event = _managed_event(db, event_id, actor)
    rsvps = registration_service.list_event_rsvps(db, event_id)
    logger.info("User %s exported %d participants of event %s", actor.user_id, len(rsvps), event_id)
    return _csv_response(export_service.participants_csv(rsvps), export_service.export_filename(event, "participants"))


@router.get("/{event_id}/export/volunteers")
def export_volunteers(event_id: str, actor: User = Depends(get_current_actor), db: Session = Depends(get_db)):
    event = _managed_event(db, event_id, actor)
    volunteers = registration_service.list_event_volunteers(db, event_id)
    logger.info("User %s exported %d volunteers of event %s", actor.user_id, len(volunteers), event_id)
    return _csv_response(export_service.volunteers_csv(volunteers), export_service.export_filename(event, "volunteers"))
