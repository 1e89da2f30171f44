"""Tests for User directory endpoints."""
from tests.conftest import create_test_user, create_test_event


class TestUserCRUD:
    """User register / get / update / list."""

    def test_create_user(self, client):
        data = create_test_user(client, name="Alice", role="ORGANIZER")
        assert data["name"] == "Alice"
        assert data["role"] == "ORGANIZER"
        assert data["enabled"] is True
        assert "user_id" in data

    def test_default_role_is_participant(self, client):
        resp = client.post("/api/users/", json={"email": "pat@example.com", "name": "Pat"})
        assert resp.status_code == 201
        assert resp.json()["role"] == "PARTICIPANT"

    def test_email_is_normalized(self, client):
        resp = client.post("/api/users/", json={"email": "Mixed.Case@Example.com", "name": "Mixed"})
        assert resp.status_code == 201
        assert resp.json()["email"] == "mixed.case@example.com"

    def test_duplicate_email_conflicts(self, client):
        client.post("/api/users/", json={"email": "dup@example.com", "name": "First"})
        resp = client.post("/api/users/", json={"email": "DUP@example.com", "name": "Second"})
        assert resp.status_code == 409
        assert resp.json()["error"] == "ConflictError"

    def test_admin_cannot_self_register(self, client):
        resp = client.post("/api/users/", json={"email": "root@example.com", "name": "Root", "role": "ADMIN"})
        assert resp.status_code == 403

    def test_invalid_email_rejected(self, client):
        resp = client.post("/api/users/", json={"email": "not-an-email", "name": "Nobody"})
        assert resp.status_code == 422

    def test_get_user(self, client):
        user = create_test_user(client)
        resp = client.get(f"/api/users/{user['user_id']}")
        assert resp.status_code == 200
        assert resp.json()["name"] == "Test User"

    def test_get_user_not_found(self, client):
        resp = client.get("/api/users/00000000-0000-0000-0000-000000000000")
        assert resp.status_code == 404

    def test_update_own_profile(self, client):
        user = create_test_user(client)
        resp = client.patch(
            f"/api/users/{user['user_id']}?actor_user_id={user['user_id']}",
            json={"name": "Updated Name", "phone": "+1 555 0100"},
        )
        assert resp.status_code == 200
        assert resp.json()["name"] == "Updated Name"
        assert resp.json()["phone"] == "+1 555 0100"
        assert resp.json()["email"] == user["email"]

    def test_partial_update_keeps_other_fields(self, client):
        user = create_test_user(client)
        client.patch(f"/api/users/{user['user_id']}?actor_user_id={user['user_id']}", json={"phone": "123"})
        resp = client.patch(f"/api/users/{user['user_id']}?actor_user_id={user['user_id']}", json={"name": "New"})
        assert resp.json()["phone"] == "123"

    def test_name_cannot_be_cleared(self, client):
        user = create_test_user(client, name="Named")
        resp = client.patch(f"/api/users/{user['user_id']}?actor_user_id={user['user_id']}", json={"name": None})
        assert resp.status_code == 400
        assert resp.json()["error"] == "ValidationFailedError"
        assert client.get(f"/api/users/{user['user_id']}").json()["name"] == "Named"

    def test_phone_can_be_cleared(self, client):
        user = create_test_user(client)
        url = f"/api/users/{user['user_id']}?actor_user_id={user['user_id']}"
        client.patch(url, json={"phone": "123"})
        resp = client.patch(url, json={"phone": None})
        assert resp.status_code == 200
        assert resp.json()["phone"] is None

    def test_cannot_update_other_profile(self, client):
        alice = create_test_user(client, name="Alice")
        bob = create_test_user(client, name="Bob")
        resp = client.patch(f"/api/users/{alice['user_id']}?actor_user_id={bob['user_id']}", json={"name": "Eve"})
        assert resp.status_code == 403

    def test_admin_can_update_any_profile(self, client, admin):
        alice = create_test_user(client, name="Alice")
        resp = client.patch(f"/api/users/{alice['user_id']}?actor_user_id={admin['user_id']}", json={"name": "Al"})
        assert resp.status_code == 200
        assert resp.json()["name"] == "Al"

    def test_update_requires_actor(self, client):
        alice = create_test_user(client, name="Alice")
        resp = client.patch(f"/api/users/{alice['user_id']}", json={"name": "Anon"})
        assert resp.status_code == 401
        resp = client.patch(f"/api/users/{alice['user_id']}?actor_user_id=ghost", json={"name": "Anon"})
        assert resp.status_code == 401

    def test_list_users(self, client):
        create_test_user(client, name="Alice")
        create_test_user(client, name="Bob")
        resp = client.get("/api/users/")
        assert resp.status_code == 200
        names = [u["name"] for u in resp.json()]
        assert names == ["Alice", "Bob"]


class TestUserRegistrations:

    def test_lists_own_rsvps_and_volunteering(self, client):
        organizer = create_test_user(client, name="Organizer", role="ORGANIZER")
        alice = create_test_user(client, name="Alice")
        eid = create_test_event(client, organizer["user_id"])["event_id"]
        client.post(f"/api/events/{eid}/rsvp?actor_user_id={alice['user_id']}", json={"status": "INTERESTED"})
        client.post(f"/api/events/{eid}/volunteers?actor_user_id={alice['user_id']}",
                    json={"role_description": "Usher"})

        rsvps = client.get(f"/api/users/{alice['user_id']}/rsvps").json()
        assert [(r["event_id"], r["status"]) for r in rsvps] == [(eid, "INTERESTED")]
        volunteering = client.get(f"/api/users/{alice['user_id']}/volunteering").json()
        assert [v["role_description"] for v in volunteering] == ["Usher"]

    def test_unknown_user(self, client):
        assert client.get("/api/users/ghost/rsvps").status_code == 404
