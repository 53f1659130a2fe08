from itts_community.bootstrap import seed_rbac
from itts_community.models.rbac import Permission, Role

ROLES_URL = "/api/v1/admin/roles"


def _permission(name):
    return Permission.query.filter_by(name=name).one()


def test_seed_is_idempotent(rbac):
    seed_rbac()

    assert Permission.query.count() == 12 * 4
    assert Role.query.count() == 2
    assert len(Role.query.filter_by(name="admin").one().permissions) == 12 * 4


def test_create_role_with_permissions(client, admin_headers):
    permission = _permission("events:read")

    response = client.post(ROLES_URL, json={"name": "event-curator", "permission_ids": [permission.id]},
                           headers=admin_headers)

    assert response.status_code == 201
    data = response.get_json()["data"]
    assert [p["name"] for p in data["permissions"]] == ["events:read"]
    assert data["permissions"][0]["resource"] == "events"
    assert data["is_system"] is False


def test_create_role_duplicate_name(client, admin_headers):
    response = client.post(ROLES_URL, json={"name": "viewer"}, headers=admin_headers)

    assert response.status_code == 409


def test_system_role_cannot_be_deleted(client, rbac, admin_headers):
    response = client.delete(f"{ROLES_URL}/{rbac['viewer'].id}", headers=admin_headers)

    assert response.status_code == 403


def test_assign_and_remove_permissions(client, admin_headers):
    role = client.post(ROLES_URL, json={"name": "editor"}, headers=admin_headers).get_json()["data"]
    ids = [_permission("mentors:update").id, _permission("mentors:read").id]

    response = client.post(f"{ROLES_URL}/{role['id']}/permissions", json={"permission_ids": ids},
                           headers=admin_headers)
    assert sorted(p["name"] for p in response.get_json()["data"]["permissions"]) == ["mentors:read", "mentors:update"]

    response = client.delete(f"{ROLES_URL}/{role['id']}/permissions", json={"permission_ids": ids[:1]},
                             headers=admin_headers)
    assert [p["name"] for p in response.get_json()["data"]["permissions"]] == ["mentors:read"]

    listed = client.get(f"{ROLES_URL}/{role['id']}/permissions", headers=admin_headers).get_json()["data"]
    assert [p["name"] for p in listed] == ["mentors:read"]


def test_list_permissions_filtered_by_resource(client, admin_headers):
    resources = client.get("/api/v1/admin/resources", headers=admin_headers).get_json()["data"]
    events = next(r for r in resources if r["name"] == "events")

    response = client.get(f"/api/v1/admin/permissions?resource_id={events['id']}", headers=admin_headers)

    body = response.get_json()
    assert body["total"] == 4
    assert {p["name"] for p in body["data"]} == {"events:create", "events:read", "events:update", "events:delete"}


def test_list_actions(client, admin_headers):
    actions = client.get("/api/v1/admin/actions", headers=admin_headers).get_json()["data"]

    assert [a["name"] for a in actions] == ["create", "delete", "read", "update"]


def test_audit_log_filters(client, admin_user, admin_headers):
    client.post(ROLES_URL, json={"name": "auditor"}, headers=admin_headers)

    response = client.get("/api/v1/admin/audit-logs?action=role.create", headers=admin_headers)

    body = response.get_json()
    assert body["total"] == 1
    assert body["data"][0]["user_id"] == admin_user.id
    assert body["data"][0]["metadata"] == {"name": "auditor"}
