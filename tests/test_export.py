"""Tests for CSV export of participants and volunteers."""
import csv
import io

from community_events.services import export_service
from tests.conftest import create_test_user, create_test_event


def _rows(resp):
    return list(csv.reader(io.StringIO(resp.text)))


class TestExport:

    def test_participants_csv(self, client):
        organizer = create_test_user(client, name="Organizer", role="ORGANIZER")
        alice = create_test_user(client, name="Alice")
        bob = create_test_user(client, name="Bob")
        event = create_test_event(client, organizer["user_id"], title="Summer Hack 2025!",
                                  participation_mode="GROUP", group_size=5)
        eid = event["event_id"]
        client.post(f"/api/events/{eid}/rsvp?actor_user_id={alice['user_id']}",
                    json={"status": "GOING", "team_name": "Owls", "team_size": 3})
        client.post(f"/api/events/{eid}/rsvp?actor_user_id={bob['user_id']}", json={"status": "INTERESTED"})

        resp = client.get(f"/api/events/{eid}/export/participants?actor_user_id={organizer['user_id']}")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert "summer-hack-2025-participants.csv" in resp.headers["content-disposition"]

        rows = _rows(resp)
        assert rows[0] == export_service.PARTICIPANT_HEADER
        by_name = {r[0]: r for r in rows[1:]}
        assert by_name["Alice"][1] == alice["email"]
        assert by_name["Alice"][2] == "GOING"
        assert by_name["Alice"][4:] == ["Owls", "3"]
        assert by_name["Bob"][2] == "INTERESTED"
        assert by_name["Bob"][4:] == ["", ""]

    def test_volunteers_csv(self, client):
        organizer = create_test_user(client, name="Organizer", role="ORGANIZER")
        alice = create_test_user(client, name="Alice")
        event = create_test_event(client, organizer["user_id"], title="Food Drive")
        eid = event["event_id"]
        client.post(f"/api/events/{eid}/volunteers?actor_user_id={alice['user_id']}",
                    json={"role_description": "Sorting, packing"})

        resp = client.get(f"/api/events/{eid}/export/volunteers?actor_user_id={organizer['user_id']}")
        assert resp.status_code == 200
        assert "food-drive-volunteers.csv" in resp.headers["content-disposition"]

        rows = _rows(resp)
        assert rows[0] == export_service.VOLUNTEER_HEADER
        assert rows[1][:4] == ["Alice", alice["email"], "PENDING", "Sorting, packing"]

    def test_empty_export_has_header_only(self, client):
        organizer = create_test_user(client, name="Organizer", role="ORGANIZER")
        event = create_test_event(client, organizer["user_id"])

        resp = client.get(f"/api/events/{event['event_id']}/export/participants"
                          f"?actor_user_id={organizer['user_id']}")
        assert _rows(resp) == [export_service.PARTICIPANT_HEADER]

    def test_export_requires_manager(self, client):
        organizer = create_test_user(client, name="Organizer", role="ORGANIZER")
        alice = create_test_user(client, name="Alice")
        event = create_test_event(client, organizer["user_id"])

        resp = client.get(f"/api/events/{event['event_id']}/export/volunteers?actor_user_id={alice['user_id']}")
        assert resp.status_code == 403

    def test_admin_can_export(self, client, admin):
        organizer = create_test_user(client, name="Organizer", role="ORGANIZER")
        event = create_test_event(client, organizer["user_id"])

        resp = client.get(f"/api/events/{event['event_id']}/export/participants?actor_user_id={admin['user_id']}")
        assert resp.status_code == 200


class TestFilename:

    class _Event:
        def __init__(self, title):
            self.title = title

    def test_slug(self):
        assert export_service.export_filename(self._Event("  Beach / Cleanup  "), "volunteers") == \
            "beach-cleanup-volunteers.csv"

    def test_symbols_only_title(self):
        assert export_service.export_filename(self._Event("!!!"), "participants") == "event-participants.csv"
