"""CSV exports of an event's participants and volunteers."""
import csv
import io
import re
from datetime import datetime
from typing import Optional

from community_events.models.event import Event
from community_events.models.rsvp import RSVP
from community_events.models.volunteer import Volunteer

PARTICIPANT_HEADER = ["Participant Name", "Email", "Status", "RSVP Date", "Team Name", "Team Size"]
VOLUNTEER_HEADER = ["Volunteer Name", "Email", "Status", "Role Description", "Registration Date"]


def _fmt_date(value: Optional[datetime]) -> str:
    return value.isoformat() if value else ""


def _write(header: list[str], rows: list[list[str]]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buf.getvalue()


def participants_csv(rsvps: list[RSVP]) -> str:
    return _write(PARTICIPANT_HEADER, [
        [
            r.user.name,
            r.user.email,
            r.status.value,
            _fmt_date(r.responded_at),
            r.team_name or "",
            "" if r.team_size is None else str(r.team_size),
        ]
        for r in rsvps
    ])


def volunteers_csv(volunteers: list[Volunteer]) -> str:
    return _write(VOLUNTEER_HEADER, [
        [
            v.user.name,
            v.user.email,
            v.status.value,
            v.role_description or "",
            _fmt_date(v.registered_at),
        ]
        for v in volunteers
    ])


def export_filename(event: Event, kind: str) -> str:
    """``Summer Hack 2025!`` -> ``summer-hack-2025-participants.csv``."""
    slug = re.sub(r"[^a-zA-Z0-9]+", "-", event.title).strip("-").lower() or "event"
    return f"{slug}-{kind}.csv"
