# itts_community/extensions.py
"""
Flask extensions initialization module.
Handles initialization and configuration of all Flask extensions.
"""

import logging

import redis
from flask import current_app
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_mail import Mail
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

# Initialize extensions
db = SQLAlchemy()
jwt = JWTManager()
cors = CORS()
migrate = Migrate()
mail = Mail()
limiter = Limiter(key_func=get_remote_address)

logger = logging.getLogger(__name__)


def init_extensions(app):
    """Initialize all Flask extensions."""

    db.init_app(app)
    logger.info("SQLAlchemy initialized")

    migrate.init_app(app, db)
    logger.info("Flask-Migrate initialized")

    jwt.init_app(app)
    logger.info("JWT Manager initialized")

    init_cors(app)

    mail.init_app(app)
    logger.info("Flask-Mail initialized")

    app.config.setdefault("RATELIMIT_DEFAULT", "200 per minute")
    limiter.init_app(app)
    logger.info("Rate limiter initialized", extra={"enabled": app.config.get("RATELIMIT_ENABLED")})

    init_redis(app)

    if app.config.get("CREATE_TABLES_ON_START"):
        with app.app_context():
            # Registers every table on db.metadata
            import itts_community.models  # noqa: F401

            db.create_all()
            logger.info("Database tables created")

    return app


def init_cors(app):
    origins = app.config.get("CORS_ORIGINS") or []
    if not origins:
        logger.warning("CORS_ORIGINS not set, CORS will be disabled")
        return

    if "*" in origins and app.config.get("ENVIRONMENT") == "production":
        raise RuntimeError("Wildcard CORS origin '*' is not allowed in production")

    cors.init_app(
        app,
        resources={r"/api/*": {"origins": origins}},
        supports_credentials=True,
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        max_age=86400,
    )
    logger.info("CORS initialized", extra={"origins": origins})


def init_redis(app):
    """Connect the Redis client used for distributed locks, if configured."""
    redis_url = app.config.get("REDIS_URL")
    app.extensions["redis"] = None
    if not redis_url:
        logger.warning("REDIS_URL not set, distributed locks are disabled")
        return

    client = redis.Redis.from_url(redis_url)
    try:
        client.ping()
        logger.info("Redis connection established")
    except redis.RedisError as e:
        logger.error(f"Failed to connect to Redis: {e}")
        if app.config.get("ENVIRONMENT") == "production":
            raise
    app.extensions["redis"] = client


def get_redis_client():
    return current_app.extensions.get("redis")
