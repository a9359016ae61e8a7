# config/settings.py
import os
from dotenv import load_dotenv

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
load_dotenv(os.path.join(BASE_DIR, ".env"))  # load .env before reading env vars


def _as_bool(val, default=False):
    if val is None:
        return default
    return str(val).lower() in ("1", "true", "yes", "on")


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "jwt-secret-key")
    JWT_EXPIRES_SECONDS = int(os.getenv("JWT_EXPIRES_SECONDS", 7 * 24 * 3600))
    EMAIL_VERIFY_EXPIRES_SECONDS = int(os.getenv("EMAIL_VERIFY_EXPIRES_SECONDS", 24 * 3600))
    REDIS_URL = os.getenv("REDIS_URL", "redis://127.0.0.1:6379/0")

    # logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR = os.getenv("LOG_DIR", "./logs")
    LOG_JSON = os.getenv("LOG_JSON", "1") == "1"
    LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", 5 * 1024 * 1024))
    LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", 5))
    LOG_TO_FILE = _as_bool(os.getenv("LOG_TO_FILE"), True)
    APP_NAME = os.getenv("APP_NAME", "blog-backend")

    # default admin, created on first start
    SEED_ADMIN_ON_STARTUP = _as_bool(os.getenv("SEED_ADMIN_ON_STARTUP", "1"), True)
    ADMIN_INIT_NAME = os.getenv("ADMIN_INIT_NAME", "admin")
    ADMIN_INIT_PASSWORD = os.getenv("ADMIN_INIT_PASSWORD", "admin1234")
    ADMIN_INIT_EMAIL = os.getenv("ADMIN_INIT_EMAIL", "admin@example.com")

    # ========= accounts =========
    PASSWORD_MIN_LENGTH = int(os.getenv("PASSWORD_MIN_LENGTH", 8))
    # skip the verify-email round trip (local development only)
    AUTH_AUTO_VERIFY_EMAIL = _as_bool(os.getenv("AUTH_AUTO_VERIFY_EMAIL"), False)

    # ========= blog =========
    COMMENT_DEFAULT_STATUS = os.getenv("COMMENT_DEFAULT_STATUS", "PENDING")
    POSTS_DEFAULT_PAGE_LIMIT = int(os.getenv("POSTS_DEFAULT_PAGE_LIMIT", 2))
    USERS_DEFAULT_PAGE_LIMIT = int(os.getenv("USERS_DEFAULT_PAGE_LIMIT", 10))

    # =========================================


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URI", "sqlite:///" + os.path.join(BASE_DIR, "blog.db"))


class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URI", "sqlite:///:memory:")
    SEED_ADMIN_ON_STARTUP = False
    LOG_JSON = False
    LOG_TO_FILE = False
    PASSWORD_MIN_LENGTH = 6


config_map = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


def get_config(config_name):
    return config_map.get(config_name, DevelopmentConfig)
