"""Community events: lifecycle, registrations, cleanup and moderation."""

__version__ = "0.1.0"
