"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates all tables for the community events service:
users, events, rsvps, volunteers.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Enum labels are the Python member names, as persisted by SAEnum
user_role = sa.Enum("participant", "organizer", "admin", name="userrole")
event_category = sa.Enum(
    "workshop", "hackathon", "donation_drive", "meetup", "conference", "seminar", "other",
    name="eventcategory",
)
participation_mode = sa.Enum("individual", "group", name="participationmode")
rsvp_status = sa.Enum("going", "interested", "not_going", name="rsvpstatus")
volunteer_status = sa.Enum("pending", "approved", "rejected", name="volunteerstatus")


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("role", user_role, nullable=False, server_default="participant"),
        sa.Column("enabled", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- events ---
    op.create_table(
        "events",
        sa.Column("event_id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("category", event_category, nullable=False, server_default="other"),
        sa.Column("location", sa.String(500), nullable=False),
        sa.Column("start_time_utc", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time_utc", sa.DateTime(timezone=True), nullable=True),
        sa.Column("registration_deadline_utc", sa.DateTime(timezone=True), nullable=True),
        sa.Column("organizer_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("max_participants", sa.Integer, nullable=True),
        sa.Column("participation_mode", participation_mode, nullable=False, server_default="individual"),
        sa.Column("group_size", sa.Integer, nullable=True),
        sa.Column("requires_approval", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_events_end_time_utc", "events", ["end_time_utc"])

    # --- rsvps ---
    op.create_table(
        "rsvps",
        sa.Column("rsvp_id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("status", rsvp_status, nullable=False),
        sa.Column("responded_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("team_name", sa.String(150), nullable=True),
        sa.Column("team_size", sa.Integer, nullable=True),
        sa.UniqueConstraint("event_id", "user_id", name="uq_rsvps_event_user"),
    )
    op.create_index("ix_rsvps_event_id", "rsvps", ["event_id"])
    op.create_index("ix_rsvps_user_id", "rsvps", ["user_id"])

    # --- volunteers ---
    op.create_table(
        "volunteers",
        sa.Column("volunteer_id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("role_description", sa.Text, nullable=True),
        sa.Column("status", volunteer_status, nullable=False, server_default="pending"),
        sa.Column("registered_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("notes", sa.Text, nullable=True),
        sa.UniqueConstraint("event_id", "user_id", name="uq_volunteers_event_user"),
    )
    op.create_index("ix_volunteers_event_id", "volunteers", ["event_id"])
    op.create_index("ix_volunteers_user_id", "volunteers", ["user_id"])


def downgrade() -> None:
    op.drop_table("volunteers")
    op.drop_table("rsvps")
    op.drop_index("ix_events_end_time_utc", table_name="events")
    op.drop_table("events")
    op.drop_table("users")
    bind = op.get_bind()
    for enum_type in (volunteer_status, rsvp_status, participation_mode, event_category, user_role):
        enum_type.drop(bind, checkfirst=True)
