import logging
from urllib.parse import urlencode

from flask import current_app
from flask_mail import Message

from itts_community.errors import ServiceUnavailable
from itts_community.extensions import mail

logger = logging.getLogger(__name__)

VERIFY_SUBJECT = "Verify your ITTS Community registration"

VERIFY_BODY = """Hi {full_name},

Thanks for registering for the {program} program.
Please confirm your e-mail address by opening the link below within 24 hours:

{link}

If you did not register, you can ignore this message.
"""


def build_verify_link(raw_token):
    base = current_app.config.get("VERIFY_EMAIL_URL")
    if not base:
        return None
    separator = "&" if "?" in base else "?"
    return f"{base}{separator}{urlencode({'token': raw_token})}"


def send_verification_email(registration, raw_token):
    """
    Mail the verification link for ``registration``.

    Returns False when no VERIFY_EMAIL_URL is configured. SMTP failures
    surface as ServiceUnavailable; the registration itself stays committed.
    """
    link = build_verify_link(raw_token)
    if link is None:
        logger.warning("VERIFY_EMAIL_URL not set, skipping verification e-mail",
                       extra={"registration_id": registration.id})
        return False

    msg = Message(
        subject=VERIFY_SUBJECT,
        recipients=[registration.email],
        body=VERIFY_BODY.format(full_name=registration.full_name, program=registration.program, link=link),
    )
    try:
        mail.send(msg)
    except Exception as e:
        logger.error(f"Failed to send verification e-mail: {e}", extra={"registration_id": registration.id})
        raise ServiceUnavailable("Failed to send verification e-mail") from e

    logger.info("Verification e-mail sent", extra={"registration_id": registration.id})
    return True
