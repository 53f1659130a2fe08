from flask import Blueprint, current_app

from itts_community.extensions import limiter
from itts_community.schemas.auth import (
    ChangePasswordSchema,
    LoginSchema,
    RefreshTokenSchema,
    UpdateProfileSchema,
)
from itts_community.schemas.user import UserOutSchema
from itts_community.security.permissions import current_auth, require_auth
from itts_community.services.auth_service import AuthService
from itts_community.utils.responses import no_content, ok
from itts_community.utils.validation import load_json

auth_bp = Blueprint("auth", __name__, url_prefix="/api/v1/auth")

user_schema = UserOutSchema()


def _auth_rate_limit():
    return current_app.config["RATELIMIT_AUTH"]


@auth_bp.post("/login")
@limiter.limit(_auth_rate_limit)
def login():
    """
    Exchange e-mail/password for an access token and a refresh token.

    The refresh token is returned once; only its hash is stored.
    """
    data = load_json(LoginSchema())
    tokens = AuthService.login(data["email"], data["password"])
    tokens["user"] = user_schema.dump(tokens["user"])
    return ok(tokens)


@auth_bp.post("/refresh")
@limiter.limit(_auth_rate_limit)
def refresh():
    """Rotate a refresh token. A token can be presented exactly once."""
    data = load_json(RefreshTokenSchema())
    return ok(AuthService.refresh(data["refresh_token"]))


@auth_bp.post("/logout")
def logout():
    data = load_json(RefreshTokenSchema())
    AuthService.logout(data["refresh_token"])
    return no_content()


@auth_bp.get("/me")
@require_auth
def me():
    user, permissions = AuthService.me(current_auth().user_id)
    payload = user_schema.dump(user)
    payload["permissions"] = permissions
    return ok(payload)


@auth_bp.patch("/profile")
@require_auth
def update_profile():
    data = load_json(UpdateProfileSchema(), partial=True)
    user = AuthService.update_profile(current_auth().user_id, data)
    return ok(user_schema.dump(user))


@auth_bp.post("/change-password")
@require_auth
def change_password():
    """Change the caller's password and sign out every other session."""
    data = load_json(ChangePasswordSchema())
    AuthService.change_password(current_auth().user_id, data["old_password"], data["new_password"])
    return no_content()
