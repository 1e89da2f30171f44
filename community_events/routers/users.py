"""User API routes."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from community_events.database import get_db
from community_events.dependencies import get_current_actor
from community_events.models.user import User
from community_events.schemas.registration import RSVPOut, VolunteerOut
from community_events.schemas.user import UserCreate, UserUpdate, UserOut
from community_events.services import registration_service, user_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register_user(payload: UserCreate, db: Session = Depends(get_db)):
    """Sign up as a participant or organizer."""
    return user_service.register_user(db, payload.email, payload.name, role=payload.role, phone=payload.phone)


@router.get("/", response_model=list[UserOut])
def list_users(db: Session = Depends(get_db)):
    return user_service.list_users(db)


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: str, db: Session = Depends(get_db)):
    return user_service.get_user(db, user_id)


@router.patch("/{user_id}", response_model=UserOut)
def update_user(
    user_id: str,
    payload: UserUpdate,
    actor: User = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Update name or phone (partial update)."""
    return user_service.update_profile(db, user_id, payload.model_dump(exclude_unset=True), actor)


@router.get("/{user_id}/rsvps", response_model=list[RSVPOut])
def list_user_rsvps(user_id: str, db: Session = Depends(get_db)):
    user = user_service.get_user(db, user_id)
    return registration_service.list_user_rsvps(db, user.user_id)


@router.get("/{user_id}/volunteering", response_model=list[VolunteerOut])
def list_user_volunteering(user_id: str, db: Session = Depends(get_db)):
    user = user_service.get_user(db, user_id)
    return registration_service.list_user_volunteering(db, user.user_id)
