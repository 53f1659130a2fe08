import pytest

from itts_community.models.event import EventRegistration, EventSpeaker

EVENTS_URL = "/api/v1/admin/events"


@pytest.fixture()
def create_event(client, admin_headers):
    def _create_event(**overrides):
        payload = {
            "title": "Intro to Threat Modeling",
            "starts_at": "2025-03-01T09:00:00Z",
            "ends_at": "2025-03-01T12:00:00Z",
            "program": "devsecops",
        }
        payload.update(overrides)
        response = client.post(EVENTS_URL, json=payload, headers=admin_headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()["data"]

    return _create_event


def test_create_event_defaults_to_draft(create_event):
    event = create_event(slug="threat-modeling")

    assert event["status"] == "draft"
    assert event["speakers"] == []


def test_create_event_duplicate_slug(client, admin_headers, create_event):
    create_event(slug="dup-slug")

    response = client.post(EVENTS_URL, json={"title": "Another", "slug": "dup-slug",
                                             "starts_at": "2025-03-02T09:00:00Z"}, headers=admin_headers)

    assert response.status_code == 409


def test_create_event_ends_before_start(client, admin_headers):
    response = client.post(EVENTS_URL, json={
        "title": "Backwards",
        "starts_at": "2025-03-02T09:00:00Z",
        "ends_at": "2025-03-01T09:00:00Z",
    }, headers=admin_headers)

    assert response.status_code == 422
    assert "ends_at" in response.get_json()["error"]["details"]["fields"]


def test_update_event_window_validated_against_stored_start(client, admin_headers, create_event):
    event = create_event()

    response = client.patch(f"{EVENTS_URL}/{event['id']}", json={"ends_at": "2025-02-01T00:00:00Z"},
                            headers=admin_headers)

    assert response.status_code == 422


def test_list_events_filters(client, admin_headers, create_event):
    create_event(title="Early bird", starts_at="2025-01-10T09:00:00Z", ends_at=None)
    create_event(title="Late show", starts_at="2025-06-10T09:00:00Z", ends_at=None, program="networking")

    response = client.get(f"{EVENTS_URL}?from=2025-05-01T00:00:00Z", headers=admin_headers)
    assert [e["title"] for e in response.get_json()["data"]] == ["Late show"]

    response = client.get(f"{EVENTS_URL}?program=devsecops", headers=admin_headers)
    assert [e["title"] for e in response.get_json()["data"]] == ["Early bird"]

    response = client.get(f"{EVENTS_URL}?search=early", headers=admin_headers)
    assert response.get_json()["total"] == 1


def test_public_event_by_slug(client, create_event):
    create_event(slug="public-talk")

    response = client.get("/api/v1/events/public-talk")

    assert response.status_code == 200
    assert response.get_json()["data"]["slug"] == "public-talk"
    assert client.get("/api/v1/events/missing").status_code == 404


def test_speakers_crud(client, admin_headers, create_event):
    event = create_event()

    second = client.post(f"{EVENTS_URL}/{event['id']}/speakers", json={"name": "Second", "sort_order": 2},
                         headers=admin_headers)
    client.post(f"{EVENTS_URL}/{event['id']}/speakers", json={"name": "First", "sort_order": 1},
                headers=admin_headers)
    assert second.status_code == 201

    speakers = client.get(f"{EVENTS_URL}/{event['id']}", headers=admin_headers).get_json()["data"]["speakers"]
    assert [s["name"] for s in speakers] == ["First", "Second"]

    speaker_id = second.get_json()["data"]["id"]
    updated = client.patch(f"/api/v1/admin/event-speakers/{speaker_id}", json={"title": "CISO"},
                           headers=admin_headers)
    assert updated.get_json()["data"]["title"] == "CISO"

    listed = client.get(f"/api/v1/admin/event-speakers?event_id={event['id']}", headers=admin_headers)
    assert listed.get_json()["total"] == 2

    assert client.delete(f"/api/v1/admin/event-speakers/{speaker_id}", headers=admin_headers).status_code == 204
    assert EventSpeaker.query.count() == 1


def test_add_speaker_to_missing_event(client, admin_headers):
    response = client.post(f"{EVENTS_URL}/nope/speakers", json={"name": "Nobody"}, headers=admin_headers)

    assert response.status_code == 404


def test_add_speaker_locks_parent_event(client, admin_headers, create_event, fake_redis):
    event = create_event()
    url = f"{EVENTS_URL}/{event['id']}/speakers"
    # a speaker whose id collides with the event id must not block adding
    fake_redis.set(f"lock:event_speakers:{event['id']}", "other")

    assert client.post(url, json={"name": "Allowed"}, headers=admin_headers).status_code == 201

    fake_redis.set(f"lock:events:{event['id']}", "other")
    response = client.post(url, json={"name": "Blocked"}, headers=admin_headers)

    assert response.status_code == 409
    assert response.get_json()["error"]["code"] == "RESOURCE_BUSY"
    assert EventSpeaker.query.count() == 1


def test_event_registration_requires_open_event(client, admin_headers, create_event):
    event = create_event()
    url = f"/api/v1/events/{event['id']}/registrations"
    payload = {"full_name": "Margaret Hamilton", "email": "margaret@itts.test"}

    assert client.post(url, json=payload).status_code == 422

    client.patch(f"{EVENTS_URL}/{event['id']}/status", json={"status": "open"}, headers=admin_headers)
    response = client.post(url, json=payload)
    assert response.status_code == 201
    assert response.get_json()["data"]["event_id"] == event["id"]

    duplicate = client.post(url, json={"full_name": "Margaret Hamilton", "email": "MARGARET@itts.test"})
    assert duplicate.status_code == 409


def test_event_registration_closed_event(client, admin_headers, create_event):
    event = create_event(status="closed")

    response = client.post(f"/api/v1/events/{event['id']}/registrations",
                           json={"full_name": "Late Comer", "email": "late@itts.test"})

    assert response.status_code == 422


def test_event_registration_unknown_event(client):
    response = client.post("/api/v1/events/missing/registrations",
                           json={"full_name": "Lost Soul", "email": "lost@itts.test"})

    assert response.status_code == 404


def test_admin_event_registrations(client, admin_headers, create_event):
    event = create_event(status="open")
    for email in ("a@itts.test", "b@itts.test"):
        client.post(f"/api/v1/events/{event['id']}/registrations", json={"full_name": "Attendee", "email": email})

    response = client.get(f"/api/v1/admin/event-registrations?event_id={event['id']}&email=A@itts.test",
                          headers=admin_headers)
    body = response.get_json()
    assert body["total"] == 1

    registration_id = body["data"][0]["id"]
    assert client.delete(f"/api/v1/admin/event-registrations/{registration_id}",
                         headers=admin_headers).status_code == 204
    assert EventRegistration.query.count() == 1


def test_delete_event_cascades(client, admin_headers, create_event):
    event = create_event(status="open")
    client.post(f"{EVENTS_URL}/{event['id']}/speakers", json={"name": "Speaker"}, headers=admin_headers)
    client.post(f"/api/v1/events/{event['id']}/registrations", json={"full_name": "Attendee", "email": "x@itts.test"})

    assert client.delete(f"{EVENTS_URL}/{event['id']}", headers=admin_headers).status_code == 204
    assert EventSpeaker.query.count() == 0
    assert EventRegistration.query.count() == 0
