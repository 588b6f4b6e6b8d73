"""Tests for notifications: listing, mark read, organizer broadcast."""
from eventdesk.models.notification import Notification
from tests.conftest import create_event, invite, make_user


def _setup(client):
    """Organizer with an event and two invitees (each gets one invite notification)."""
    _, org_headers = make_user(client, "alice", role="organizer")
    bob, bob_headers = make_user(client, "bob")
    carol, carol_headers = make_user(client, "carol")
    event = create_event(client, org_headers, name="Demo")
    invite(client, org_headers, event["event_id"], bob["user_id"])
    invite(client, org_headers, event["event_id"], carol["user_id"])
    return org_headers, bob_headers, carol_headers, event


class TestNotifyAttendees:

    def test_one_per_invitee(self, client, db):
        org_headers, bob_headers, carol_headers, event = _setup(client)
        resp = client.post(f"/api/events/{event['event_id']}/notify",
                           json={"message": "Doors open at 9"}, headers=org_headers)
        assert resp.status_code == 200
        assert resp.json() == {"event_id": event["event_id"], "notified": 2}
        for headers in (bob_headers, carol_headers):
            messages = [n["message"] for n in client.get("/api/my-notifications", headers=headers).json()]
            assert "[Demo] Doors open at 9" in messages

    def test_non_owner_forbidden(self, client, db):
        _, bob_headers, _, event = _setup(client)
        before = db.query(Notification).count()
        resp = client.post(f"/api/events/{event['event_id']}/notify",
                           json={"message": "spam"}, headers=bob_headers)
        assert resp.status_code == 403
        assert db.query(Notification).count() == before

    def test_empty_message(self, client):
        org_headers, _, _, event = _setup(client)
        resp = client.post(f"/api/events/{event['event_id']}/notify",
                           json={"message": ""}, headers=org_headers)
        assert resp.status_code == 400


class TestMarkRead:

    def test_mark_one_read(self, client):
        _, bob_headers, _, _ = _setup(client)
        note = client.get("/api/my-notifications", headers=bob_headers).json()[0]
        resp = client.patch(f"/api/notifications/{note['notification_id']}", headers=bob_headers)
        assert resp.status_code == 200
        assert resp.json()["is_read"] is True
        unread = client.get("/api/my-notifications?unread_only=true", headers=bob_headers).json()
        assert unread == []

    def test_cannot_mark_someone_elses(self, client, db):
        _, bob_headers, carol_headers, _ = _setup(client)
        note = client.get("/api/my-notifications", headers=bob_headers).json()[0]
        resp = client.patch(f"/api/notifications/{note['notification_id']}", headers=carol_headers)
        assert resp.status_code == 403
        stored = db.query(Notification).filter(Notification.notification_id == note["notification_id"]).one()
        assert stored.is_read is False

    def test_unknown_notification(self, client):
        _, bob_headers, _, _ = _setup(client)
        resp = client.patch("/api/notifications/nope", headers=bob_headers)
        assert resp.status_code == 404


class TestMarkAllRead:

    def test_idempotent(self, client):
        org_headers, bob_headers, _, event = _setup(client)
        client.post(f"/api/events/{event['event_id']}/notify", json={"message": "hello"}, headers=org_headers)

        first = client.patch("/api/notifications/mark-all-read", headers=bob_headers)
        assert first.status_code == 200
        assert first.json() == {"updated": 2}
        assert all(n["is_read"] for n in client.get("/api/my-notifications", headers=bob_headers).json())

        second = client.patch("/api/notifications/mark-all-read", headers=bob_headers)
        assert second.status_code == 200
        assert second.json() == {"updated": 0}
        notes = client.get("/api/my-notifications", headers=bob_headers).json()
        assert len(notes) == 2
        assert all(n["is_read"] for n in notes)

    def test_leaves_other_users_alone(self, client):
        _, bob_headers, carol_headers, _ = _setup(client)
        client.patch("/api/notifications/mark-all-read", headers=bob_headers)
        carol_notes = client.get("/api/my-notifications", headers=carol_headers).json()
        assert [n["is_read"] for n in carol_notes] == [False]


class TestUnreadCount:

    def test_counts_only_unread_of_caller(self, client):
        org_headers, bob_headers, carol_headers, event = _setup(client)
        client.post(f"/api/events/{event['event_id']}/notify", json={"message": "hello"}, headers=org_headers)

        resp = client.get("/api/my-notifications/unread-count", headers=bob_headers)
        assert resp.status_code == 200
        assert resp.json() == {"unreadCount": 2}

        first = client.get("/api/my-notifications", headers=bob_headers).json()[0]
        client.patch(f"/api/notifications/{first['notification_id']}", headers=bob_headers)
        assert client.get("/api/my-notifications/unread-count", headers=bob_headers).json() == {"unreadCount": 1}
        assert client.get("/api/my-notifications/unread-count", headers=carol_headers).json() == {"unreadCount": 2}

    def test_requires_token(self, client):
        assert client.get("/api/my-notifications/unread-count").status_code == 401
