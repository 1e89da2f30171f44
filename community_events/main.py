"""FastAPI application entry point."""
import logging
from datetime import timedelta

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from community_events.config import settings
from community_events.database import Base, SessionLocal, engine
from community_events.exceptions import register_error_handlers
from community_events.logging_config import configure_logging
from community_events.scheduler import CleanupScheduler
from community_events.services import user_service
from community_events.services.notification_service import build_notifier

# Import routers
from community_events.routers import admin, events, registrations, users

# Import all models so Base.metadata knows about them
import community_events.models  # noqa: F401

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Community events — creation, discovery, RSVPs, volunteer sign-ups and moderation",
    version="0.1.0",
)

register_error_handlers(app)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(registrations.router, prefix="/api/events", tags=["Registrations"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])

cleanup_scheduler = CleanupScheduler(
    SessionLocal,
    run_at_hour=settings.CLEANUP_HOUR,
    tz_name=settings.CLEANUP_TIMEZONE,
    retention=timedelta(hours=settings.CLEANUP_RETENTION_HOURS),
)


@app.on_event("startup")
def on_startup():
    """Create tables in SQLite dev mode, build the notifier, seed the admin and start the cleanup job."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    app.state.notifier = build_notifier(settings)
    if settings.ADMIN_EMAIL:
        db = SessionLocal()
        try:
            user_service.ensure_admin(db, settings.ADMIN_EMAIL, settings.ADMIN_NAME)
        finally:
            db.close()
    if settings.CLEANUP_ENABLED:
        cleanup_scheduler.start()


@app.on_event("shutdown")
def on_shutdown():
    cleanup_scheduler.stop()
    app.state.notifier.shutdown()


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
