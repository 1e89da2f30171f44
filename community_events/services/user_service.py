"""User directory: registration, lookup and profile edits."""
import logging
from typing import Any, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from community_events.database import transaction
from community_events.exceptions import ConflictError, NotFoundError, PermissionDeniedError, ValidationFailedError
from community_events.models.user import User, UserRole

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise NotFoundError("User not found", detail=f"No user with id {user_id}")
    return user


def find_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == _normalize_email(email)).first()


def register_user(db: Session, email: str, name: str, role: UserRole = UserRole.participant,
                  phone: Optional[str] = None) -> User:
    """Self-service sign-up as participant or organizer."""
    if role == UserRole.admin:
        raise PermissionDeniedError("Admin accounts cannot be self-registered")
    if find_by_email(db, email):
        raise ConflictError("Email already exists")

    try:
        with transaction(db):
            user = User(email=_normalize_email(email), name=name, phone=phone, role=role, enabled=True)
            db.add(user)
    except IntegrityError as exc:
        raise ConflictError("Email already exists") from exc
    db.refresh(user)
    logger.info("Registered %s %s (%s)", role.value.lower(), user.user_id, user.email)
    return user


def list_users(db: Session, role: Optional[UserRole] = None, enabled: Optional[bool] = None,
               search: Optional[str] = None) -> list[User]:
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    if enabled is not None:
        query = query.filter(User.enabled.is_(enabled))
    if search:
        pattern = f"%{search.lower()}%"
        query = query.filter(or_(func.lower(User.name).like(pattern), func.lower(User.email).like(pattern)))
    return query.order_by(User.name).all()


def update_profile(db: Session, user_id: str, patch: dict[str, Any], actor: User) -> User:
    """Users edit their own name and phone; admins may edit anyone's."""
    user = get_user(db, user_id)
    if actor.user_id != user.user_id and actor.role != UserRole.admin:
        raise PermissionDeniedError("You may only edit your own profile")
    if "name" in patch and patch["name"] is None:
        raise ValidationFailedError("Name cannot be cleared")
    with transaction(db):
        for field in ("name", "phone"):
            if field in patch:
                setattr(user, field, patch[field])
    db.refresh(user)
    logger.info("Updated profile of user %s", user_id)
    return user


def ensure_admin(db: Session, email: str, name: str) -> User:
    """Create the seed admin account if it does not exist yet."""
    existing = find_by_email(db, email)
    if existing:
        return existing
    with transaction(db):
        admin = User(email=_normalize_email(email), name=name, role=UserRole.admin, enabled=True)
        db.add(admin)
    db.refresh(admin)
    logger.info("Seeded admin account %s", admin.email)
    return admin
