import logging

from flask import g, request
from flask_jwt_extended import decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt import ExpiredSignatureError, InvalidTokenError

from itts_community.security.permissions import AuthContext

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def init_auth_context_middleware(app):
    """
    Decode the Bearer access token once per request and expose the caller
    as ``g.auth``. A missing or unusable token leaves the request anonymous
    with the reason in ``g.auth_error``; protected routes turn that into a
    401, public ones (login, refresh) proceed.
    """

    @app.before_request
    def load_auth_context():
        g.auth = None
        g.auth_error = None
        header = request.headers.get("Authorization")
        if not header:
            return None

        if not header.startswith(BEARER_PREFIX):
            g.auth_error = "Invalid authorization header format"
            return None

        token = header[len(BEARER_PREFIX):].strip()
        if not token:
            g.auth_error = "Invalid authorization header format"
            return None

        try:
            claims = decode_token(token)
        except ExpiredSignatureError:
            g.auth_error = "Token expired"
            return None
        except (InvalidTokenError, JWTExtendedException) as e:
            logger.info(f"Rejected access token: {e}")
            g.auth_error = "Invalid token"
            return None

        if claims.get("type") != "access":
            g.auth_error = "Invalid token"
            return None

        g.auth = AuthContext.from_claims(claims)
        return None
