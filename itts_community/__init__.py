"""
Flask application factory for the ITTS community API.
"""

import logging
from typing import Optional

import sentry_sdk
from flask import Flask
from sentry_sdk.integrations.flask import FlaskIntegration

from itts_community.config import get_config
from itts_community.errors import register_error_handlers
from itts_community.extensions import init_extensions
from itts_community.logging_config import setup_logging
from itts_community.middleware import init_auth_context_middleware, init_request_id_middleware
from itts_community.routes import register_routes

logger = logging.getLogger(__name__)


def setup_sentry(app: Flask) -> None:
    """Initialize Sentry error tracking"""
    sentry_dsn = app.config.get("SENTRY_DSN")

    if sentry_dsn and app.config.get("ENVIRONMENT") == "production":
        sentry_sdk.init(
            dsn=sentry_dsn,
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,
            environment="production",
            send_default_pii=False,
        )
        logger.info("Sentry error tracking initialized")


def setup_security_headers(app: Flask) -> None:
    """Add security headers to all responses"""

    @app.after_request
    def add_security_headers(response):
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"
        if app.config.get("ENVIRONMENT") == "production":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


def create_app(config_name: Optional[str] = None) -> Flask:
    """
    Application factory.

    Args:
        config_name: development, testing or production; falls back to APP_ENV.

    Raises:
        ConfigurationError: unknown config name or invalid production settings.
    """
    app = Flask(__name__)

    # ===== CONFIGURATION (FAIL FAST) =====
    config = get_config(config_name)
    config.validate()
    app.config.from_object(config)

    # ===== LOGGING & MONITORING =====
    setup_logging(app)
    setup_sentry(app)

    # ===== EXTENSIONS =====
    init_extensions(app)

    # Model metadata must be loaded before anything touches the tables
    import itts_community.models  # noqa: F401

    # ===== MIDDLEWARE =====
    init_request_id_middleware(app)
    init_auth_context_middleware(app)
    setup_security_headers(app)

    # ===== ERRORS & ROUTES =====
    register_error_handlers(app)
    register_routes(app)

    logger.info("Application initialized", extra={"environment": app.config.get("ENVIRONMENT")})
    return app
