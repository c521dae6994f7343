"""Application configuration settings"""

import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: str) -> list:
    return [x.strip().lower() for x in os.getenv(name, default).split(",") if x.strip()]


class Config:
    # Flask settings
    SECRET_KEY = os.getenv("FLASK_SECRET", "default-secret-key")
    TESTING = _env_flag("TESTING")
    DEBUG = _env_flag("DEBUG")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # JSON request bodies
    MAX_BODY_KB = int(os.getenv("MAX_BODY_KB", "64"))

    # Sanitization
    # "bleach" when an HTML parser backend is wanted, "regex" for the
    # pattern-only fallback.
    HTML_SANITIZER = os.getenv("HTML_SANITIZER", "bleach").lower()

    # File upload policy
    MAX_UPLOAD_MB = float(os.getenv("MAX_UPLOAD_MB", "5"))
    ALLOWED_MIME_TYPES = _env_list(
        "ALLOWED_MIME_TYPES", "image/jpeg,image/png,image/gif,image/webp"
    )
    ALLOWED_EXTENSIONS = _env_list("ALLOWED_EXTENSIONS", "jpg,jpeg,png,gif,webp")
    SNIFF_UPLOAD_MIME = _env_flag("SNIFF_UPLOAD_MIME", "true")

    # Rate limiting
    RATELIMIT_ENABLED = _env_flag("RATELIMIT_ENABLED", "true")
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    DEFAULT_RATE_LIMITS = os.getenv(
        "DEFAULT_RATE_LIMITS", "500 per day,100 per minute"
    ).split(",")
    VALIDATE_RATE_LIMIT = os.getenv("VALIDATE_RATE_LIMIT", "30 per minute")


class DevelopmentConfig(Config):
    """Development configuration"""

    DEBUG = True
    LOG_LEVEL = "DEBUG"


class TestingConfig(Config):
    """Testing configuration"""

    TESTING = True
    RATELIMIT_ENABLED = False
    SNIFF_UPLOAD_MIME = False


class ProductionConfig(Config):
    """Production configuration"""

    pass


# Configuration dictionary
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env=None):
    """Get configuration based on environment"""
    if env is None:
        env = os.getenv("FLASK_ENV", "development")
    return config.get(env, config["default"])
