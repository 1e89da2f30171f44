"""Application configuration via environment variables."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    APP_NAME: str = "Community Events"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = "sqlite:///./community_events.db"
    CORS_ORIGINS: str = "http://localhost:3000"

    # Cleanup scheduler
    CLEANUP_ENABLED: bool = True
    CLEANUP_HOUR: int = 3
    CLEANUP_TIMEZONE: str = "UTC"  # IANA tz
    CLEANUP_RETENTION_HOURS: int = 0

    # Outbound mail; empty key means notifications are only logged
    SENDGRID_API_KEY: str = ""
    SENDGRID_FROM_EMAIL: str = "noreply@community-events.local"

    # Seeded on startup when set
    ADMIN_EMAIL: str = ""
    ADMIN_NAME: str = "Administrator"

    class Config:
        env_file = ".env"


settings = Settings()
