import os


def _optional(value):
    """Treat an empty environment value as unset."""
    return value or None


class Config:
    # CORS
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")

    # Rate limiting
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_ENABLED = os.getenv("RATELIMIT_ENABLED", "true").lower() in ("1", "true", "yes")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Engine
    ROUND_ROBIN_MAX_TEAMS = int(os.getenv("ROUND_ROBIN_MAX_TEAMS", "16"))
    DEFAULT_TIEBREAKER = _optional(os.getenv("DEFAULT_TIEBREAKER"))


class DevelopmentConfig(Config):
    DEBUG = True
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key"
    RATELIMIT_ENABLED = False
    DEFAULT_TIEBREAKER = None


class ProductionConfig(Config):
    DEBUG = False
    SECRET_KEY = os.getenv("SECRET_KEY")

    @staticmethod
    def init_app(app):
        if not app.config.get("SECRET_KEY"):
            raise RuntimeError("SECRET_KEY must be set in production")


config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}
