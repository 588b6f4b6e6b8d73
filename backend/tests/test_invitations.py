"""Tests for invitations and the invitee's one-time response."""
from eventdesk.models.invitation import Invitation
from tests.conftest import create_event, invite, make_user


def _setup(client):
    organizer, org_headers = make_user(client, "alice", role="organizer")
    bob, bob_headers = make_user(client, "bob")
    event = create_event(client, org_headers)
    return (organizer, org_headers), (bob, bob_headers), event


class TestInvite:

    def test_invite_creates_pending_invitation(self, client):
        (_, org_headers), (bob, _), event = _setup(client)
        inv = invite(client, org_headers, event["event_id"], bob["user_id"])
        assert inv["response"] is None
        assert inv["user_id"] == bob["user_id"]
        assert inv["event_id"] == event["event_id"]

    def test_duplicate_invite(self, client, db):
        (_, org_headers), (bob, _), event = _setup(client)
        invite(client, org_headers, event["event_id"], bob["user_id"])
        resp = client.post(f"/api/events/{event['event_id']}/invitations",
                           json={"user_id": bob["user_id"]}, headers=org_headers)
        assert resp.status_code == 409
        assert db.query(Invitation).count() == 1

    def test_invite_unknown_user(self, client):
        (_, org_headers), _, event = _setup(client)
        resp = client.post(f"/api/events/{event['event_id']}/invitations",
                           json={"user_id": "nobody"}, headers=org_headers)
        assert resp.status_code == 404

    def test_only_owner_invites(self, client):
        _, (bob, bob_headers), event = _setup(client)
        carol, _ = make_user(client, "carol")
        resp = client.post(f"/api/events/{event['event_id']}/invitations",
                           json={"user_id": carol["user_id"]}, headers=bob_headers)
        assert resp.status_code == 403

    def test_invite_notifies_invitee(self, client):
        (_, org_headers), (bob, bob_headers), event = _setup(client)
        invite(client, org_headers, event["event_id"], bob["user_id"])
        notes = client.get("/api/my-notifications", headers=bob_headers).json()
        assert len(notes) == 1
        assert "invited" in notes[0]["message"]
        assert notes[0]["is_read"] is False

    def test_owner_lists_event_invitations(self, client):
        (_, org_headers), (bob, bob_headers), event = _setup(client)
        invite(client, org_headers, event["event_id"], bob["user_id"])
        resp = client.get(f"/api/events/{event['event_id']}/invitations", headers=org_headers)
        assert resp.status_code == 200
        assert [i["user_id"] for i in resp.json()] == [bob["user_id"]]

        resp = client.get(f"/api/events/{event['event_id']}/invitations", headers=bob_headers)
        assert resp.status_code == 403


class TestRespond:

    def test_respond_yes(self, client):
        (_, org_headers), (bob, bob_headers), event = _setup(client)
        inv = invite(client, org_headers, event["event_id"], bob["user_id"])
        resp = client.post(f"/api/invitations/{inv['invitation_id']}/respond",
                           json={"response": "yes"}, headers=bob_headers)
        assert resp.status_code == 200
        assert resp.json()["response"] == "yes"
        assert resp.json()["responded_at"] is not None

    def test_first_response_is_final(self, client, db):
        (_, org_headers), (bob, bob_headers), event = _setup(client)
        inv = invite(client, org_headers, event["event_id"], bob["user_id"])
        client.post(f"/api/invitations/{inv['invitation_id']}/respond",
                    json={"response": "no"}, headers=bob_headers)
        resp = client.post(f"/api/invitations/{inv['invitation_id']}/respond",
                           json={"response": "yes"}, headers=bob_headers)
        assert resp.status_code == 409
        stored = db.query(Invitation).one()
        assert stored.response.value == "no"

    def test_non_owner_forbidden_and_unchanged(self, client, db):
        (_, org_headers), (bob, _), event = _setup(client)
        _, carol_headers = make_user(client, "carol")
        inv = invite(client, org_headers, event["event_id"], bob["user_id"])
        for headers in (carol_headers, org_headers):
            resp = client.post(f"/api/invitations/{inv['invitation_id']}/respond",
                               json={"response": "yes"}, headers=headers)
            assert resp.status_code == 403
        assert db.query(Invitation).one().response is None

    def test_invalid_response_value(self, client):
        (_, org_headers), (bob, bob_headers), event = _setup(client)
        inv = invite(client, org_headers, event["event_id"], bob["user_id"])
        resp = client.post(f"/api/invitations/{inv['invitation_id']}/respond",
                           json={"response": "maybe"}, headers=bob_headers)
        assert resp.status_code == 400

    def test_unknown_invitation(self, client):
        _, (_, bob_headers), _ = _setup(client)
        resp = client.post("/api/invitations/nope/respond", json={"response": "yes"}, headers=bob_headers)
        assert resp.status_code == 404

    def test_response_notifies_organizer(self, client):
        (_, org_headers), (bob, bob_headers), event = _setup(client)
        inv = invite(client, org_headers, event["event_id"], bob["user_id"])
        client.post(f"/api/invitations/{inv['invitation_id']}/respond",
                    json={"response": "yes"}, headers=bob_headers)
        notes = client.get("/api/my-notifications", headers=org_headers).json()
        assert any("bob" in n["message"] and "yes" in n["message"] for n in notes)


class TestMyInvitations:

    def test_lists_with_event_summary(self, client):
        (_, org_headers), (bob, bob_headers), event = _setup(client)
        invite(client, org_headers, event["event_id"], bob["user_id"])
        resp = client.get("/api/my-invitations", headers=bob_headers)
        assert resp.status_code == 200
        data = resp.json()
        assert len(data) == 1
        assert data[0]["event"]["name"] == event["name"]
        assert data[0]["event"]["location"] == event["location"]
        assert data[0]["response"] is None

    def test_only_callers_invitations(self, client):
        (_, org_headers), (bob, _), event = _setup(client)
        _, carol_headers = make_user(client, "carol")
        invite(client, org_headers, event["event_id"], bob["user_id"])
        assert client.get("/api/my-invitations", headers=carol_headers).json() == []


class TestJoin:

    def test_join_public_event(self, client):
        _, (bob, bob_headers), event = _setup(client)
        resp = client.post(f"/api/events/{event['event_id']}/join", headers=bob_headers)
        assert resp.status_code == 201
        assert resp.json()["user_id"] == bob["user_id"]
        assert resp.json()["response"] is None

    def test_join_twice(self, client):
        _, (_, bob_headers), event = _setup(client)
        client.post(f"/api/events/{event['event_id']}/join", headers=bob_headers)
        resp = client.post(f"/api/events/{event['event_id']}/join", headers=bob_headers)
        assert resp.status_code == 409

    def test_join_private_event(self, client):
        (_, org_headers), (_, bob_headers), _ = _setup(client)
        private = create_event(client, org_headers, name="Secret", is_public=False)
        resp = client.post(f"/api/events/{private['event_id']}/join", headers=bob_headers)
        assert resp.status_code == 403

