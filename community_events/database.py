"""Database engine, session factory and transaction helper."""
import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from community_events.config import settings
from community_events.exceptions import UnavailableError

logger = logging.getLogger(__name__)

_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, connect_args=_connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a request-scoped session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session):
    """Run a unit of work atomically.

    Commits on normal exit; on any exception rolls back and re-raises.
    Store connectivity failures surface as ``UnavailableError`` so callers
    outside the HTTP layer (the cleanup scheduler) see a typed error.
    Services never call ``commit()`` themselves.
    """
    try:
        yield db
        db.commit()
    except OperationalError as exc:
        db.rollback()
        logger.error("Store unavailable, transaction rolled back: %s", exc)
        raise UnavailableError("Data store unavailable", detail=str(exc.orig)) from exc
    except Exception:
        db.rollback()
        raise
