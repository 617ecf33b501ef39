import os
from datetime import timedelta


class BaseConfig:
    """Base configuration for PlateSense."""

    SECRET_KEY = os.environ.get("PLATESENSE_SECRET_KEY", "dev-secret-key")
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "PLATESENSE_DATABASE_URI",
        "sqlite:///platesense.db",
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    GEMINI_API_KEY = os.environ.get("PLATESENSE_GEMINI_API_KEY")
    GEMINI_MODEL = os.environ.get("PLATESENSE_GEMINI_MODEL", "gemini-1.5-flash")
    GEMINI_MAX_OUTPUT_TOKENS = int(
        os.environ.get("PLATESENSE_GEMINI_MAX_OUTPUT_TOKENS", "800")
    )

    SUPPORTED_LANGUAGES = ("pt", "en", "es")
    DEFAULT_LANGUAGE = "pt"
    LANGUAGE_COOKIE_NAME = "prefLanguage"
    LANGUAGE_COOKIE_MAX_AGE = timedelta(days=365)

    # Base64 photos from phone cameras are large.
    MAX_CONTENT_LENGTH = 50 * 1024 * 1024

    AUTO_INIT_DB = os.environ.get("PLATESENSE_AUTO_INIT_DB", "1") in {"1", "true", "True"}
    LOG_LEVEL = os.environ.get("PLATESENSE_LOG_LEVEL", "INFO")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.environ.get("PLATESENSE_LOG_LEVEL", "DEBUG")


class ProductionConfig(BaseConfig):
    DEBUG = False


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    GEMINI_API_KEY = None
    AUTO_INIT_DB = True


config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


def get_config():
    """Return the appropriate config class based on FLASK_ENV."""
    env = os.environ.get("FLASK_ENV", "development").lower()
    return config_by_name.get(env, DevelopmentConfig)
