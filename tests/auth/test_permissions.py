from datetime import timedelta

import pytest
from flask_jwt_extended import create_access_token, create_refresh_token

from itts_community.extensions import db
from itts_community.models.user import UserRole
from itts_community.security.permissions import WILDCARD_PERMISSION, AuthContext
from itts_community.services.permission_service import PermissionService
from itts_community.utils.timeutil import utcnow

pytestmark = pytest.mark.auth

MENTORS_URL = "/api/v1/admin/mentors"


def test_super_admin_resolves_to_wildcard(super_admin):
    assert PermissionService.resolve_permissions(super_admin) == [WILDCARD_PERMISSION]


def test_permissions_are_distinct_and_sorted(rbac, make_user):
    user = make_user(roles=[rbac["admin"], rbac["viewer"]])

    permissions = PermissionService.resolve_permissions(user)

    assert permissions == sorted(set(permissions))
    assert len(permissions) == 12 * 4
    assert PermissionService.role_names(user) == ["admin", "viewer"]


def test_expired_role_assignment_is_ignored(rbac, make_user):
    user = make_user()
    db.session.add(UserRole(user_id=user.id, role_id=rbac["admin"].id, expires_at=utcnow() - timedelta(minutes=1)))
    db.session.commit()

    assert PermissionService.resolve_permissions(user) == []
    assert PermissionService.role_names(user) == []


def test_user_without_roles_has_no_permissions(make_user):
    assert PermissionService.resolve_permissions(make_user()) == []


def test_auth_context_permission_checks():
    ctx = AuthContext(user_id="u1", email="a@b.c", permissions=frozenset({"mentors:read"}))

    assert ctx.has_permission("mentors:read")
    assert not ctx.has_permission("mentors:create")
    assert AuthContext(user_id="u1", email="", permissions=frozenset({WILDCARD_PERMISSION})).has_permission("x:y")
    assert AuthContext(user_id="u1", email="", is_super_admin=True).has_permission("x:y")


def test_missing_token_denied(client, rbac):
    response = client.get(MENTORS_URL)

    assert response.status_code == 401


def test_viewer_can_read_but_not_write(client, viewer_headers):
    assert client.get(MENTORS_URL, headers=viewer_headers).status_code == 200

    response = client.post(MENTORS_URL, json={"full_name": "Grace Hopper"}, headers=viewer_headers)

    assert response.status_code == 403
    assert response.get_json()["error"]["code"] == "FORBIDDEN"


def test_super_admin_passes_every_check(client, super_admin, auth_headers):
    response = client.post(MENTORS_URL, json={"full_name": "Grace Hopper"}, headers=auth_headers(super_admin))

    assert response.status_code == 201


@pytest.mark.parametrize("header", ["Token abc", "Bearer ", "Bearer not-a-jwt"])
def test_malformed_authorization_header(client, header):
    response = client.get("/api/v1/auth/me", headers={"Authorization": header})

    assert response.status_code == 401


def test_expired_access_token(app, client, make_user):
    user = make_user()
    token = create_access_token(identity=user.id, expires_delta=timedelta(seconds=-1))

    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.get_json()["error"]["message"] == "Token expired"


def test_refresh_type_jwt_is_not_an_access_token(app, client, make_user):
    user = make_user()
    token = create_refresh_token(identity=user.id)

    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_public_endpoints_ignore_missing_auth(client):
    assert client.get("/healthz").status_code == 200
