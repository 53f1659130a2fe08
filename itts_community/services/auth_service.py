import logging

from itts_community.errors import BadRequest, Conflict, Forbidden, NotFound, Unauthorized
from itts_community.extensions import db
from itts_community.models.user import User
from itts_community.security.passwords import hash_password, verify_password
from itts_community.services.audit_service import AuditService
from itts_community.services.permission_service import PermissionService
from itts_community.services.token_service import TokenService
from itts_community.utils.timeutil import utcnow

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def normalize_email(email):
    return email.strip().lower()


class AuthService:

    @staticmethod
    def _login_failed(reason, email, user_id=None):
        AuditService.record(
            "user.login.failed",
            user_id=user_id,
            resource_type="user",
            resource_id=user_id,
            metadata={"email": email, "reason": reason},
        )
        db.session.commit()
        logger.warning(f"Login failed: {reason}", extra={"email": email, "user_id": user_id})

    @staticmethod
    def login(email, password):
        email = normalize_email(email)
        user = User.query.filter_by(email=email).first()

        if user is None:
            AuthService._login_failed("user_not_found", email)
            raise Unauthorized(INVALID_CREDENTIALS)

        if not user.is_active:
            AuthService._login_failed("account_inactive", email, user.id)
            raise Forbidden("Account is inactive")

        if not user.has_password:
            AuthService._login_failed("no_password", email, user.id)
            raise BadRequest("This account uses OAuth login. Please sign in with your OAuth provider")

        if not verify_password(password, user.password_hash):
            AuthService._login_failed("invalid_password", email, user.id)
            raise Unauthorized(INVALID_CREDENTIALS)

        try:
            tokens = TokenService.issue_tokens(user)
            user.last_login_at = utcnow()
            AuditService.record("user.login.success", user_id=user.id, resource_type="user", resource_id=user.id)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info("User logged in", extra={"user_id": user.id})
        tokens["user"] = user
        return tokens

    @staticmethod
    def refresh(raw_token):
        return TokenService.rotate(raw_token)

    @staticmethod
    def logout(raw_token):
        """Revoke the presented refresh token; unknown tokens are not an error."""
        user_id = TokenService.revoke(raw_token)
        if user_id is None:
            return
        AuditService.record("user.logout", user_id=user_id, resource_type="user", resource_id=user_id)
        db.session.commit()

    @staticmethod
    def get_user(user_id):
        user = db.session.get(User, user_id)
        if user is None:
            raise NotFound("user", user_id)
        return user

    @staticmethod
    def me(user_id):
        user = AuthService.get_user(user_id)
        return user, PermissionService.resolve_permissions(user)

    @staticmethod
    def update_profile(user_id, data):
        user = AuthService.get_user(user_id)

        if "email" in data:
            email = normalize_email(data["email"])
            if email != user.email:
                if User.query.filter(User.email == email, User.id != user.id).first():
                    raise Conflict("Email already in use")
                user.email = email
        if "full_name" in data:
            user.full_name = data["full_name"]

        AuditService.record("user.profile.update", user_id=user.id, resource_type="user", resource_id=user.id,
                            metadata={"fields": sorted(data.keys())})
        db.session.commit()
        return user

    @staticmethod
    def change_password(user_id, old_password, new_password):
        """
        Update the password hash and revoke every refresh token of the user in
        a single transaction, so existing sessions cannot outlive the change.
        """
        user = AuthService.get_user(user_id)
        if not user.has_password:
            raise BadRequest("This account has no password set")
        if not verify_password(old_password, user.password_hash):
            raise BadRequest("Old password is incorrect")

        try:
            user.password_hash = hash_password(new_password)
            revoked = TokenService.revoke_all_for_user(user.id)
            AuditService.record("user.password.change", user_id=user.id, resource_type="user", resource_id=user.id,
                                metadata={"revoked_tokens": revoked})
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        logger.info("Password changed", extra={"user_id": user.id, "revoked_tokens": revoked})
