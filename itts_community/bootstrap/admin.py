import logging

from itts_community.extensions import db
from itts_community.models.user import User
from itts_community.security.passwords import hash_password
from itts_community.services.auth_service import normalize_email

logger = logging.getLogger(__name__)


def create_admin_user(email, password, name=None):
    """
    Create a super-admin account. Returns ``(user, created)``; an existing
    account with the same e-mail is left untouched.
    """
    email = normalize_email(email)
    existing = User.query.filter_by(email=email).first()
    if existing:
        return existing, False

    admin = User(
        email=email,
        full_name=name,
        password_hash=hash_password(password),
        is_active=True,
        is_super_admin=True,
    )
    db.session.add(admin)
    db.session.commit()

    logger.info("Admin user created", extra={"user_id": admin.id})
    return admin, True
