import logging

from flask import current_app

from itts_community.errors import BadRequest, Conflict, NotFound, UnprocessableEntity
from itts_community.extensions import db
from itts_community.models.registration import (
    STATUS_APPROVED,
    STATUS_REJECTED,
    EmailVerification,
    Registration,
)
from itts_community.security.tokens import TokenManager
from itts_community.services.audit_service import AuditService
from itts_community.services.email_service import send_verification_email
from itts_community.utils.pagination import list_query
from itts_community.utils.redis_lock import redis_lock
from itts_community.utils.timeutil import utcnow

logger = logging.getLogger(__name__)

LOCK_TTL = 10

SORT_FIELDS = {
    "created_at": Registration.created_at,
    "full_name": Registration.full_name,
    "email": Registration.email,
    "intake_year": Registration.intake_year,
    "status": Registration.status,
}


class RegistrationService:

    @staticmethod
    def register(data):
        """
        Create a pending registration plus its e-mail verification token, then
        mail the verification link. Returns the registration.
        """
        email = data["email"].strip().lower()
        if Registration.query.filter_by(email=email).first():
            raise Conflict("Email already registered")

        raw_token = None
        with redis_lock(f"lock:registrations:{email}", LOCK_TTL):
            try:
                registration = Registration(
                    full_name=data["full_name"].strip(),
                    email=email,
                    program=data["program"],
                    student_id=data["student_id"].strip(),
                    intake_year=data["intake_year"],
                    motivation=data["motivation"],
                )
                db.session.add(registration)
                db.session.flush()

                raw_token, token_hash = TokenManager.generate_verification_token()
                db.session.add(EmailVerification(
                    registration_id=registration.id,
                    token_hash=token_hash,
                    expires_at=TokenManager.calculate_expiry_time(current_app.config["EMAIL_VERIFICATION_TTL"]),
                ))
                db.session.commit()
            except Exception:
                db.session.rollback()
                raise

        logger.info("Registration created", extra={"registration_id": registration.id})
        send_verification_email(registration, raw_token)
        return registration

    @staticmethod
    def verify_email(raw_token):
        if not raw_token:
            raise BadRequest("Missing token")

        token_hash = TokenManager.hash_token(raw_token)
        now = utcnow()

        with redis_lock(f"lock:registrations:verify:{token_hash}", LOCK_TTL):
            verification = EmailVerification.query.filter(
                EmailVerification.token_hash == token_hash,
                EmailVerification.used_at.is_(None),
                EmailVerification.expires_at > now,
            ).first()
            if verification is None:
                raise BadRequest("Invalid or expired token")

            try:
                verification.used_at = now
                registration = verification.registration
                if registration.email_verified_at is None:
                    registration.email_verified_at = now
                db.session.commit()
            except Exception:
                db.session.rollback()
                raise

        logger.info("Registration e-mail verified", extra={"registration_id": registration.id})
        return registration

    @staticmethod
    def get(registration_id):
        registration = db.session.get(Registration, registration_id)
        if registration is None:
            raise NotFound("registration", registration_id)
        return registration

    @staticmethod
    def list_registrations(params):
        return list_query(
            Registration.query,
            Registration,
            params,
            search_columns=(Registration.full_name, Registration.email, Registration.student_id),
            sort_fields=SORT_FIELDS,
            default_sort=(Registration.created_at.desc(),),
        )

    @staticmethod
    def approve(registration_id, admin_id):
        with redis_lock(f"lock:registrations:{registration_id}", LOCK_TTL):
            registration = RegistrationService.get(registration_id)
            if registration.email_verified_at is None:
                raise UnprocessableEntity("Email not verified")
            if registration.status == STATUS_REJECTED:
                raise Conflict("Registration already rejected")

            registration.status = STATUS_APPROVED
            registration.approved_by = admin_id
            registration.approved_at = utcnow()
            registration.rejected_reason = None
            AuditService.record("registration.approve", user_id=admin_id, resource_type="registration",
                                resource_id=registration.id)
            db.session.commit()
        return registration

    @staticmethod
    def reject(registration_id, admin_id, reason):
        with redis_lock(f"lock:registrations:{registration_id}", LOCK_TTL):
            registration = RegistrationService.get(registration_id)
            if registration.status == STATUS_APPROVED:
                raise Conflict("Registration already approved")

            registration.status = STATUS_REJECTED
            registration.approved_by = admin_id
            registration.approved_at = utcnow()
            registration.rejected_reason = reason
            AuditService.record("registration.reject", user_id=admin_id, resource_type="registration",
                                resource_id=registration.id, metadata={"reason": reason})
            db.session.commit()
        return registration

    @staticmethod
    def delete(registration_id, admin_id):
        registration = RegistrationService.get(registration_id)
        db.session.delete(registration)
        AuditService.record("registration.delete", user_id=admin_id, resource_type="registration",
                            resource_id=registration_id)
        db.session.commit()
