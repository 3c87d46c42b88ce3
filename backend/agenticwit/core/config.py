"""Configuration classes, one per environment, filled from env variables.

``APP_ENV`` picks the class (``development``, ``testing`` or ``production``).
A ``.env`` file next to the process is loaded first when present.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Final

from dotenv import load_dotenv

ENV_VAR: Final[str] = "APP_ENV"
_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "y", "on"})

load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Read ``name`` as a flag; ``1/true/yes/y/on`` in any case count as set."""
    raw = os.getenv(name)
    return default if raw is None else raw.strip().lower() in _TRUTHY


def env_int(name: str, default: int) -> int:
    """Read ``name`` as an integer. Blank or malformed values give ``default``."""
    raw = (os.getenv(name) or "").strip()
    return int(raw) if raw.lstrip("-").isdigit() else default


class BaseConfig:
    """
    Settings shared by every environment.

    Notes
    -----
    Token lifetimes come from ``JWT_EXPIRES_MINUTES`` (access, default 15)
    and ``REFRESH_TOKEN_DAYS`` (refresh, default 7). The ``AUTH_*_RATE_LIMIT``
    strings are Flask-Limiter expressions read per request, so a subclass or
    test config can change them without re-registering routes.
    ``CORS_ORIGINS`` is a comma-separated list, or ``*`` for any origin.
    """

    DEBUG = False
    TESTING = False

    API_BASE_PREFIX = "/api"
    APP_VERSION = os.getenv("APP_VERSION", "0.1.0")
    APP_COMMIT = os.getenv("APP_COMMIT", "unknown")

    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt")

    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "CHANGE_ME_JWT")
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=env_int("JWT_EXPIRES_MINUTES", 15))
    REFRESH_TOKEN_EXPIRES = timedelta(days=env_int("REFRESH_TOKEN_DAYS", 7))

    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO")

    REDIS_URL = os.getenv("REDIS_URL") or None
    RATELIMIT_ENABLED = env_bool("RATELIMIT_ENABLED", True)
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", REDIS_URL or "memory://")
    RATELIMIT_HEADERS_ENABLED = True
    AUTH_REGISTER_RATE_LIMIT = os.getenv("AUTH_REGISTER_RATE_LIMIT", "5 per 15 minutes")
    AUTH_LOGIN_RATE_LIMIT = os.getenv("AUTH_LOGIN_RATE_LIMIT", "10 per 15 minutes")
    AUTH_REFRESH_RATE_LIMIT = os.getenv("AUTH_REFRESH_RATE_LIMIT", "20 per 15 minutes")
    AUTH_PASSWORD_RATE_LIMIT = os.getenv("AUTH_PASSWORD_RATE_LIMIT", "5 per 15 minutes")

    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)
    PROXYFIX_HOPS = env_int("PROXYFIX_HOPS", 1)

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000")
    CORS_MAX_AGE = env_int("CORS_MAX_AGE", 600)


class DevelopmentConfig(BaseConfig):
    DEBUG = env_bool("FLASK_DEBUG", True)


class TestingConfig(BaseConfig):
    """In-memory SQLite, cheap password hashing, no rate limits, no Redis.

    ``TEST_DATABASE_URL`` points the suite at another database.
    """

    TESTING = True
    PROPAGATE_EXCEPTIONS = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = False
    JWT_SECRET_KEY = "testing-jwt-secret-key-with-enough-length"
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    REDIS_URL = None
    RATELIMIT_ENABLED = False
    RATELIMIT_STORAGE_URI = "memory://"
    USE_PROXYFIX = False
    CORS_ORIGINS = "http://localhost:3000"


class ProductionConfig(BaseConfig):
    SQLALCHEMY_ECHO = False


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Config class named by ``APP_ENV``; unknown or unset means development."""
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
