from datetime import timedelta

from .base import BaseConfig


class TestingConfig(BaseConfig):
    """
    Test configuration: in-memory SQLite, no Redis, no outgoing mail.
    """

    ENVIRONMENT = "testing"
    TESTING = True

    SECRET_KEY = "test-secret-key"
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length"
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=15)
    REFRESH_TOKEN_EXPIRES = timedelta(days=30)
    BCRYPT_ROUNDS = 4

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {}

    REDIS_URL = None
    RATELIMIT_ENABLED = False
    CORS_ORIGINS = []

    MAIL_SUPPRESS_SEND = True
    MAIL_DEFAULT_SENDER = "test@example.com"
    VERIFY_EMAIL_URL = "http://localhost:3000/verify-email"

    LOG_LEVEL = "WARNING"
    SENTRY_DSN = None
