"""
Application error taxonomy and the Flask handlers that render it.

Every error leaves the API as::

    {"error": {"code": ..., "message": ..., "details": {...}}, "meta": {...}}
"""

import logging

from flask import jsonify
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import HTTPException

from itts_community.utils.responses import response_meta

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    code = "INTERNAL_SERVER_ERROR"
    default_message = "Internal server error"

    def __init__(self, message=None, details=None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self):
        body = {"code": self.code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class BadRequest(AppError):
    status_code = 400
    code = "BAD_REQUEST"
    default_message = "Bad request"


class Unauthorized(AppError):
    status_code = 401
    code = "UNAUTHORIZED"
    default_message = "Unauthorized"


class Forbidden(AppError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "Forbidden"


class NotFound(AppError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"

    def __init__(self, resource, resource_id=None, message=None):
        details = {"resource": resource}
        if resource_id is not None:
            details["id"] = str(resource_id)
        super().__init__(message or f"{resource} not found", details)


class Conflict(AppError):
    status_code = 409
    code = "CONFLICT"
    default_message = "Conflict"


class UnprocessableEntity(AppError):
    status_code = 422
    code = "UNPROCESSABLE_ENTITY"
    default_message = "Unprocessable entity"


class ValidationFailed(AppError):
    status_code = 422
    code = "VALIDATION_ERROR"
    default_message = "Validation failed"

    def __init__(self, fields, message=None):
        super().__init__(message, {"fields": fields})


class InternalError(AppError):
    pass


class ServiceUnavailable(AppError):
    status_code = 503
    code = "SERVICE_UNAVAILABLE"
    default_message = "Service unavailable"


def error_response(error):
    payload = {"error": error.to_dict(), "meta": response_meta()}
    return jsonify(payload), error.status_code


def register_error_handlers(app):
    """Register all error handlers for the application"""

    @app.errorhandler(AppError)
    def handle_app_error(e):
        if e.status_code >= 500:
            logger.error(f"{e.code}: {e.message}", exc_info=e.__cause__ or e)
        else:
            logger.info(f"{e.code}: {e.message}")
        return error_response(e)

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(e):
        return error_response(ValidationFailed(e.normalized_messages()))

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(e):
        from itts_community.extensions import db

        db.session.rollback()
        logger.warning(f"Integrity error: {e.orig}")
        return error_response(Conflict("Resource conflicts with an existing record"))

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(e):
        from itts_community.extensions import db

        db.session.rollback()
        logger.error("Database error", exc_info=e)
        return error_response(InternalError())

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        """
        Handles werkzeug HTTP errors (unknown route, bad method, 429, ...)
        """
        error = AppError(e.description)
        error.status_code = e.code
        error.code = e.name.upper().replace(" ", "_")
        return error_response(error)

    @app.errorhandler(Exception)
    def handle_exception(e):
        """
        Handles all unexpected server errors.
        Prevents stack trace leakage.
        """
        logger.exception("Unhandled exception")
        return error_response(InternalError())

    logger.debug("Error handlers registered")
