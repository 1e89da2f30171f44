"""Moderation API routes; every handler requires the ADMIN role."""
import logging
from datetime import timedelta
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from community_events.config import settings
from community_events.database import get_db
from community_events.dependencies import get_current_actor
from community_events.models.user import User, UserRole
from community_events.schemas.admin import AdminStats, CleanupRequest, CleanupResult
from community_events.schemas.event import EventOut
from community_events.schemas.user import RoleChange, UserOut
from community_events.services import moderation_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/users", response_model=list[UserOut])
def list_users(
    role: Optional[UserRole] = Query(None),
    enabled: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, description="Case-insensitive match on name or email"),
    actor: User = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    return moderation_service.list_users(db, actor, role=role, enabled=enabled, search=search)


@router.post("/users/{user_id}/enable", response_model=UserOut)
def enable_user(user_id: str, actor: User = Depends(get_current_actor), db: Session = Depends(get_db)):
    return moderation_service.enable_user(db, actor, user_id)


@router.post("/users/{user_id}/disable", response_model=UserOut)
def disable_user(user_id: str, actor: User = Depends(get_current_actor), db: Session = Depends(get_db)):
    return moderation_service.disable_user(db, actor, user_id)


@router.post("/users/{user_id}/role", response_model=UserOut)
def change_user_role(
    user_id: str,
    payload: RoleChange,
    actor: User = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    return moderation_service.change_user_role(db, actor, user_id, payload.role)


@router.get("/events", response_model=list[EventOut])
def list_events(
    state: str = Query("all", description="all | active | inactive | pending | upcoming"),
    actor: User = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    return moderation_service.list_events(db, actor, state=state)


@router.post("/events/{event_id}/activate", response_model=EventOut)
def activate_event(event_id: str, actor: User = Depends(get_current_actor), db: Session = Depends(get_db)):
    return moderation_service.activate_event(db, actor, event_id)


@router.post("/events/{event_id}/deactivate", response_model=EventOut)
def deactivate_event(event_id: str, actor: User = Depends(get_current_actor), db: Session = Depends(get_db)):
    return moderation_service.deactivate_event(db, actor, event_id)


@router.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: str, actor: User = Depends(get_current_actor), db: Session = Depends(get_db)):
    moderation_service.delete_event(db, actor, event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/stats", response_model=AdminStats)
def get_stats(actor: User = Depends(get_current_actor), db: Session = Depends(get_db)):
    return moderation_service.get_statistics(db, actor)


@router.post("/cleanup", response_model=CleanupResult)
def run_cleanup(
    payload: Optional[CleanupRequest] = None,
    actor: User = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Purge completed events now, without waiting for the scheduled run."""
    cutoff = payload.cutoff if payload else None
    retention = timedelta(hours=settings.CLEANUP_RETENTION_HOURS)
    cutoff, deleted = moderation_service.purge_events(db, actor, cutoff=cutoff, retention=retention)
    return CleanupResult(cutoff=cutoff, deleted_count=len(deleted), deleted=deleted)
