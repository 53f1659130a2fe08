from itts_community.models.audit_log import AuditLog
from itts_community.models.roadmap import RoadmapItem

MENTORS_URL = "/api/v1/admin/mentors"
PARTNERS_URL = "/api/v1/admin/partners"
ROADMAPS_URL = "/api/v1/admin/roadmaps"
ITEMS_URL = "/api/v1/admin/roadmap-items"


# ===== MENTORS =====

def test_mentor_lifecycle(client, admin_headers):
    created = client.post(MENTORS_URL, json={
        "full_name": "Radia Perlman",
        "title": "Network engineer",
        "programs": ["networking"],
        "priority": 3,
    }, headers=admin_headers)
    assert created.status_code == 201
    mentor = created.get_json()["data"]
    assert mentor["is_active"] is True

    updated = client.patch(f"{MENTORS_URL}/{mentor['id']}", json={"bio": "Inventor of STP"}, headers=admin_headers)
    assert updated.get_json()["data"]["bio"] == "Inventor of STP"

    deactivated = client.patch(f"{MENTORS_URL}/{mentor['id']}/active", json={"is_active": False},
                               headers=admin_headers)
    assert deactivated.get_json()["data"]["is_active"] is False

    reprioritized = client.patch(f"{MENTORS_URL}/{mentor['id']}/priority", json={"priority": 9},
                                 headers=admin_headers)
    assert reprioritized.get_json()["data"]["priority"] == 9

    assert client.delete(f"{MENTORS_URL}/{mentor['id']}", headers=admin_headers).status_code == 204
    assert client.get(f"{MENTORS_URL}/{mentor['id']}", headers=admin_headers).status_code == 404
    assert AuditLog.query.filter(AuditLog.action.like("mentor.%")).count() == 5


def test_mentor_negative_priority_rejected(client, admin_headers):
    mentor = client.post(MENTORS_URL, json={"full_name": "Linus Torvalds"}, headers=admin_headers).get_json()["data"]

    response = client.patch(f"{MENTORS_URL}/{mentor['id']}/priority", json={"priority": -1}, headers=admin_headers)

    assert response.status_code == 422


def test_mentor_list_filters_and_default_order(client, admin_headers):
    client.post(MENTORS_URL, json={"full_name": "Low Priority", "programs": ["programming"], "priority": 1},
                headers=admin_headers)
    client.post(MENTORS_URL, json={"full_name": "High Priority", "programs": ["programming", "networking"],
                                   "priority": 7}, headers=admin_headers)
    client.post(MENTORS_URL, json={"full_name": "Inactive One", "is_active": False}, headers=admin_headers)

    body = client.get(f"{MENTORS_URL}?program=programming", headers=admin_headers).get_json()
    assert [m["full_name"] for m in body["data"]] == ["High Priority", "Low Priority"]

    body = client.get(f"{MENTORS_URL}?program=networking", headers=admin_headers).get_json()
    assert [m["full_name"] for m in body["data"]] == ["High Priority"]

    body = client.get(f"{MENTORS_URL}?is_active=false", headers=admin_headers).get_json()
    assert [m["full_name"] for m in body["data"]] == ["Inactive One"]


def test_mentor_unknown_program_rejected(client, admin_headers):
    response = client.post(MENTORS_URL, json={"full_name": "Someone Else", "programs": ["cooking"]},
                           headers=admin_headers)

    assert response.status_code == 422


def test_mentor_update_locked(client, admin_headers, fake_redis):
    mentor = client.post(MENTORS_URL, json={"full_name": "Ken Thompson"}, headers=admin_headers).get_json()["data"]
    fake_redis.set(f"lock:mentors:{mentor['id']}", "other")

    response = client.patch(f"{MENTORS_URL}/{mentor['id']}", json={"bio": "Unix"}, headers=admin_headers)

    assert response.status_code == 409
    assert response.get_json()["error"]["code"] == "RESOURCE_BUSY"


# ===== PARTNERS =====

def test_partner_crud_and_kind_filter(client, admin_headers):
    lab = client.post(PARTNERS_URL, json={"name": "Security Lab", "kind": "lab"}, headers=admin_headers)
    client.post(PARTNERS_URL, json={"name": "Acme Corp", "kind": "partner_industry", "priority": 2},
                headers=admin_headers)
    assert lab.status_code == 201

    body = client.get(f"{PARTNERS_URL}?kind=lab", headers=admin_headers).get_json()
    assert [p["name"] for p in body["data"]] == ["Security Lab"]

    partner_id = lab.get_json()["data"]["id"]
    updated = client.patch(f"{PARTNERS_URL}/{partner_id}", json={"website_url": "https://lab.example.org"},
                           headers=admin_headers)
    assert updated.get_json()["data"]["website_url"] == "https://lab.example.org"

    assert client.delete(f"{PARTNERS_URL}/{partner_id}", headers=admin_headers).status_code == 204
    assert client.get(PARTNERS_URL, headers=admin_headers).get_json()["total"] == 1


def test_partner_invalid_kind(client, admin_headers):
    response = client.post(PARTNERS_URL, json={"name": "Mystery", "kind": "sponsor"}, headers=admin_headers)

    assert response.status_code == 422


# ===== ROADMAPS =====

def test_roadmap_with_items(client, admin_headers):
    roadmap = client.post(ROADMAPS_URL, json={"month_number": 2, "title": "Linux fundamentals",
                                              "program": "networking"}, headers=admin_headers).get_json()["data"]

    nested = client.post(f"{ROADMAPS_URL}/{roadmap['id']}/items", json={"item_text": "Shell basics", "sort_order": 2},
                         headers=admin_headers)
    direct = client.post(ITEMS_URL, json={"roadmap_id": roadmap["id"], "item_text": "Filesystem layout",
                                          "sort_order": 1}, headers=admin_headers)
    assert nested.status_code == 201
    assert direct.status_code == 201

    fetched = client.get(f"{ROADMAPS_URL}/{roadmap['id']}", headers=admin_headers).get_json()["data"]
    assert [i["item_text"] for i in fetched["items"]] == ["Filesystem layout", "Shell basics"]

    items = client.get(f"{ITEMS_URL}?roadmap_id={roadmap['id']}", headers=admin_headers).get_json()
    assert items["total"] == 2

    item_id = nested.get_json()["data"]["id"]
    updated = client.patch(f"{ITEMS_URL}/{item_id}", json={"item_text": "Bash basics"}, headers=admin_headers)
    assert updated.get_json()["data"]["item_text"] == "Bash basics"

    assert client.delete(f"{ROADMAPS_URL}/{roadmap['id']}", headers=admin_headers).status_code == 204
    assert RoadmapItem.query.count() == 0


def test_roadmap_month_out_of_range(client, admin_headers):
    response = client.post(ROADMAPS_URL, json={"month_number": 13, "title": "Too late"}, headers=admin_headers)

    assert response.status_code == 422


def test_roadmap_list_filters(client, admin_headers):
    for month in (1, 2, 3):
        client.post(ROADMAPS_URL, json={"month_number": month, "title": f"Month {month}"}, headers=admin_headers)

    body = client.get(f"{ROADMAPS_URL}?month_number=2", headers=admin_headers).get_json()
    assert [r["title"] for r in body["data"]] == ["Month 2"]

    body = client.get(ROADMAPS_URL, headers=admin_headers).get_json()
    assert [r["month_number"] for r in body["data"]] == [1, 2, 3]


def test_item_for_missing_roadmap(client, admin_headers):
    response = client.post(ITEMS_URL, json={"roadmap_id": "missing", "item_text": "Orphan"}, headers=admin_headers)

    assert response.status_code == 404
