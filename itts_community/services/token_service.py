import logging
from datetime import timedelta

from flask import current_app
from flask_jwt_extended import create_access_token
from sqlalchemy import update

from itts_community.errors import Forbidden, Unauthorized
from itts_community.extensions import db
from itts_community.models.refresh_token import RefreshToken
from itts_community.models.user import User
from itts_community.security.tokens import TokenManager
from itts_community.services.permission_service import PermissionService
from itts_community.utils.timeutil import utcnow

logger = logging.getLogger(__name__)

INVALID_REFRESH_TOKEN = "Invalid or expired refresh token"


class TokenService:
    ACCESS_EXPIRES = timedelta(minutes=15)
    REFRESH_EXPIRES = timedelta(days=30)

    @staticmethod
    def _access_ttl():
        return current_app.config.get("JWT_ACCESS_TOKEN_EXPIRES", TokenService.ACCESS_EXPIRES)

    @staticmethod
    def _refresh_ttl():
        return current_app.config.get("REFRESH_TOKEN_EXPIRES", TokenService.REFRESH_EXPIRES)

    @staticmethod
    def create_access_token(user, roles, permissions):
        return create_access_token(
            identity=user.id,
            additional_claims={
                "user_id": user.id,
                "email": user.email,
                "is_super_admin": user.is_super_admin,
                "roles": list(roles),
                "permissions": list(permissions),
            },
            expires_delta=TokenService._access_ttl(),
        )

    @staticmethod
    def issue_tokens(user):
        """
        Mint an access token with a fresh role/permission snapshot and stage a
        new refresh token row. The caller owns the commit.

        The raw refresh token only ever exists in the returned payload.
        """
        roles = PermissionService.role_names(user)
        permissions = PermissionService.resolve_permissions(user)
        access_token = TokenService.create_access_token(user, roles, permissions)

        raw_token, token_hash = TokenManager.generate_refresh_token()
        db.session.add(RefreshToken(
            user_id=user.id,
            token_hash=token_hash,
            expires_at=TokenManager.calculate_expiry_time(TokenService._refresh_ttl()),
        ))

        return {
            "access_token": access_token,
            "refresh_token": raw_token,
            "token_type": "Bearer",
            "expires_in": int(TokenService._access_ttl().total_seconds()),
        }

    @staticmethod
    def find_active(raw_token, now=None):
        now = now or utcnow()
        return RefreshToken.query.filter(
            RefreshToken.token_hash == TokenManager.hash_token(raw_token),
            RefreshToken.revoked_at.is_(None),
            RefreshToken.expires_at > now,
        ).first()

    @staticmethod
    def rotate(raw_token):
        """
        Exchange a refresh token for a new token pair.

        Revoking the presented token, persisting its successor and minting the
        access token happen in one transaction. The revoke is conditional on
        the row still being active, so two racing rotations of the same token
        cannot both succeed.
        """
        now = utcnow()
        token = TokenService.find_active(raw_token, now)
        if token is None:
            raise Unauthorized(INVALID_REFRESH_TOKEN)

        user = db.session.get(User, token.user_id)
        if user is None:
            raise Unauthorized(INVALID_REFRESH_TOKEN)
        if not user.is_active:
            raise Forbidden("Account is inactive")

        try:
            result = db.session.execute(
                update(RefreshToken)
                .where(RefreshToken.id == token.id, RefreshToken.revoked_at.is_(None))
                .values(revoked_at=now)
            )
            if result.rowcount != 1:
                raise Unauthorized(INVALID_REFRESH_TOKEN)

            payload = TokenService.issue_tokens(user)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info("Refresh token rotated", extra={"user_id": user.id})
        return payload

    @staticmethod
    def revoke(raw_token):
        """Revoke one refresh token. Returns the owning user id, or None."""
        token = TokenService.find_active(raw_token)
        if token is None:
            return None
        token.revoked_at = utcnow()
        return token.user_id

    @staticmethod
    def revoke_all_for_user(user_id):
        """Stage revocation of every active refresh token the user holds."""
        result = db.session.execute(
            update(RefreshToken)
            .where(RefreshToken.user_id == user_id, RefreshToken.revoked_at.is_(None))
            .values(revoked_at=utcnow())
        )
        return result.rowcount

    @staticmethod
    def sweep_expired(now=None):
        """Physically delete refresh tokens past their expiry."""
        now = now or utcnow()
        deleted = RefreshToken.query.filter(RefreshToken.expires_at <= now).delete(synchronize_session=False)
        db.session.commit()
        logger.info("Expired refresh tokens swept", extra={"deleted": deleted})
        return deleted
