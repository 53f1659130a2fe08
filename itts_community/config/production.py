from .base import BaseConfig, ConfigurationError


class ProductionConfig(BaseConfig):
    """
    Production configuration.
    """

    ENVIRONMENT = "production"
    DEBUG = False

    @classmethod
    def validate(cls):
        # MUST be set via environment variable in real production
        missing = [name for name in ("SECRET_KEY", "JWT_SECRET_KEY") if not getattr(cls, name)]
        if missing:
            raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")

        if cls.SQLALCHEMY_DATABASE_URI.startswith("sqlite"):
            raise ConfigurationError("DATABASE_URL must point to PostgreSQL in production")
