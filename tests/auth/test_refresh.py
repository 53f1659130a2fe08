from datetime import timedelta

import pytest
from flask_jwt_extended import create_access_token

from itts_community.extensions import db
from itts_community.models.refresh_token import RefreshToken
from itts_community.models.user import UserRole
from itts_community.security.tokens import TokenManager
from itts_community.services.token_service import TokenService
from itts_community.utils.timeutil import utcnow
from tests.conftest import DEFAULT_PASSWORD

pytestmark = pytest.mark.auth

REFRESH_URL = "/api/v1/auth/refresh"


def _login(client, user):
    response = client.post("/api/v1/auth/login", json={"email": user.email, "password": DEFAULT_PASSWORD})
    assert response.status_code == 200
    return response.get_json()["data"]


def test_refresh_rotates_token(client, make_user):
    user = make_user()
    tokens = _login(client, user)

    response = client.post(REFRESH_URL, json={"refresh_token": tokens["refresh_token"]})

    assert response.status_code == 200
    rotated = response.get_json()["data"]
    assert rotated["refresh_token"] != tokens["refresh_token"]
    assert rotated["access_token"]
    assert "user" not in rotated

    old = RefreshToken.query.filter_by(token_hash=TokenManager.hash_token(tokens["refresh_token"])).one()
    assert old.revoked_at is not None
    assert RefreshToken.query.filter_by(user_id=user.id, revoked_at=None).count() == 1


def test_refresh_replay_is_rejected(client, make_user):
    user = make_user()
    tokens = _login(client, user)

    first = client.post(REFRESH_URL, json={"refresh_token": tokens["refresh_token"]})
    second = client.post(REFRESH_URL, json={"refresh_token": tokens["refresh_token"]})

    assert first.status_code == 200
    assert second.status_code == 401
    assert second.get_json()["error"]["code"] == "UNAUTHORIZED"


def test_refresh_unknown_token(client):
    response = client.post(REFRESH_URL, json={"refresh_token": "f" * 64})

    assert response.status_code == 401


def test_refresh_expired_token(client, make_user):
    user = make_user()
    tokens = _login(client, user)
    stored = RefreshToken.query.filter_by(user_id=user.id).one()
    stored.expires_at = utcnow() - timedelta(seconds=1)
    db.session.commit()

    response = client.post(REFRESH_URL, json={"refresh_token": tokens["refresh_token"]})

    assert response.status_code == 401


def test_refresh_after_logout(client, make_user):
    user = make_user()
    tokens = _login(client, user)

    logout = client.post("/api/v1/auth/logout", json={"refresh_token": tokens["refresh_token"]})
    response = client.post(REFRESH_URL, json={"refresh_token": tokens["refresh_token"]})

    assert logout.status_code == 204
    assert response.status_code == 401


def test_logout_unknown_token_is_noop(client):
    response = client.post("/api/v1/auth/logout", json={"refresh_token": "a" * 64})

    assert response.status_code == 204


def test_refresh_inactive_user_forbidden(client, make_user):
    user = make_user()
    tokens = _login(client, user)
    user.is_active = False
    db.session.commit()

    response = client.post(REFRESH_URL, json={"refresh_token": tokens["refresh_token"]})

    assert response.status_code == 403


def test_role_change_visible_after_refresh(client, rbac, make_user):
    user = make_user()
    tokens = _login(client, user)
    headers = {"Authorization": f"Bearer {tokens['access_token']}"}
    assert client.get("/api/v1/admin/mentors", headers=headers).status_code == 403

    db.session.add(UserRole(user_id=user.id, role_id=rbac["viewer"].id))
    db.session.commit()

    rotated = client.post(REFRESH_URL, json={"refresh_token": tokens["refresh_token"]}).get_json()["data"]
    headers = {"Authorization": f"Bearer {rotated['access_token']}"}
    assert client.get("/api/v1/admin/mentors", headers=headers).status_code == 200


def test_sweep_expired_removes_only_expired_rows(app, make_user):
    user = make_user()
    now = utcnow()
    db.session.add_all([
        RefreshToken(user_id=user.id, token_hash="a" * 64, expires_at=now - timedelta(days=1)),
        RefreshToken(user_id=user.id, token_hash="b" * 64, expires_at=now + timedelta(days=1)),
    ])
    db.session.commit()

    assert TokenService.sweep_expired() == 1
    assert [t.token_hash for t in RefreshToken.query.all()] == ["b" * 64]


def test_concurrent_rotation_only_one_wins(client, make_user, monkeypatch):
    user = make_user()
    tokens = _login(client, user)
    lookup = TokenService.find_active
    winner = {}

    def lookup_then_lose_race(raw_token, now=None):
        token = lookup(raw_token, now)
        # the competing request rotates the same token before our revoke runs
        monkeypatch.setattr(TokenService, "find_active", staticmethod(lookup))
        winner.update(TokenService.rotate(raw_token))
        return token

    monkeypatch.setattr(TokenService, "find_active", staticmethod(lookup_then_lose_race))

    response = client.post(REFRESH_URL, json={"refresh_token": tokens["refresh_token"]})

    assert response.status_code == 401
    assert winner["refresh_token"]
    active = RefreshToken.query.filter_by(user_id=user.id, revoked_at=None).all()
    assert [t.token_hash for t in active] == [TokenManager.hash_token(winner["refresh_token"])]


def test_refresh_ignores_expired_bearer_header(client, make_user):
    user = make_user()
    tokens = _login(client, user)
    stale = create_access_token(identity=user.id, expires_delta=timedelta(seconds=-1))

    response = client.post(
        REFRESH_URL,
        json={"refresh_token": tokens["refresh_token"]},
        headers={"Authorization": f"Bearer {stale}"},
    )

    assert response.status_code == 200
    assert response.get_json()["data"]["access_token"]
