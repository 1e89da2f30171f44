"""FastAPI dependencies: current actor and notifier."""
from typing import Optional

from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session

from community_events.database import get_db
from community_events.exceptions import AuthenticationRequiredError, PermissionDeniedError
from community_events.models.user import User
from community_events.services.notification_service import Notifier


def get_current_actor(
    actor_user_id: Optional[str] = Query(None, description="ID of the user performing the request"),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the calling user; authentication itself happens upstream."""
    if not actor_user_id:
        raise AuthenticationRequiredError("Authentication required")
    actor = db.query(User).filter(User.user_id == actor_user_id).first()
    if not actor:
        raise AuthenticationRequiredError("Authentication required", detail=f"Unknown user {actor_user_id}")
    if not actor.enabled:
        raise PermissionDeniedError("Account disabled")
    return actor


def get_notifier(request: Request) -> Notifier:
    """The process-wide notifier built on application startup."""
    return request.app.state.notifier
