"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Public selector env var
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

# Load .env for local runs (no-op when the file is missing)
load_dotenv()


class ConfigurationError(RuntimeError):
    """Raised when the application cannot start with the supplied settings."""


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    :param name: Environment variable to inspect.
    :param default: Value returned when the variable is unset.
    :returns: ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    JWT_SECRET_KEY: str | None
        Symmetric key signing access tokens. No default: startup fails
        without it.
    JWT_ISSUER / JWT_AUDIENCE: str
        Values embedded in and validated against every access token.
    JWT_ACCESS_TOKEN_MINUTES: int
        Access-token lifetime.
    REFRESH_TOKEN_TTL_DAYS: int
        Server-side lifetime of a refresh token (and of its cookie).
    COVER_IMAGES_DIR: str
        Filesystem directory receiving uploaded book covers.
    PUBLIC_BASE_URL: str | None
        Absolute origin used when building cover URLs; the request host is
        used when unset.
    """

    API_BASE_PREFIX = "/api"
    APP_VERSION = os.getenv("APP_VERSION", "dev")

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "library-catalog")
    JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "library-catalog-clients")
    JWT_ACCESS_TOKEN_MINUTES = env_int("JWT_ACCESS_TOKEN_MINUTES", 15)
    JWT_ALGORITHM = "HS256"
    JWT_TOKEN_LOCATION = ["headers", "cookies"]
    JWT_ACCESS_COOKIE_NAME = "access_token"
    JWT_COOKIE_CSRF_PROTECT = env_bool("JWT_COOKIE_CSRF_PROTECT", False)
    JWT_SESSION_COOKIE = True

    REFRESH_TOKEN_TTL_DAYS = env_int("REFRESH_TOKEN_TTL_DAYS", 7)
    REFRESH_COOKIE_NAME = "refresh_token"
    AUTH_COOKIE_SECURE = env_bool("AUTH_COOKIE_SECURE", True)
    AUTH_COOKIE_SAMESITE = os.getenv("AUTH_COOKIE_SAMESITE", "None")
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./catalog.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Covers
    COVER_IMAGES_DIR = os.getenv("COVER_IMAGES_DIR", os.path.abspath("./images"))
    PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL")
    MAX_CONTENT_LENGTH = env_int("MAX_CONTENT_LENGTH", 5 * 1024 * 1024)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Cookies are not marked ``Secure`` by default so the API works over plain
    ``http://localhost``.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    AUTH_COOKIE_SECURE = env_bool("AUTH_COOKIE_SECURE", False)


class TestingConfig(BaseConfig):
    """Configuration for automated test runs."""

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "testing-secret-key-with-enough-bytes")
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments."""

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


def validate_jwt_settings(config: Mapping[str, object]) -> None:
    """Fail fast when token signing cannot work.

    :param config: Flask config mapping after all sources were loaded.
    :raises ConfigurationError: If the signing secret, issuer or audience is
        missing, or the access-token lifetime is not positive.
    """
    if not config.get("JWT_SECRET_KEY"):
        raise ConfigurationError("JWT_SECRET_KEY is not configured.")
    for key in ("JWT_ISSUER", "JWT_AUDIENCE"):
        if not config.get(key):
            raise ConfigurationError(f"{key} is not configured.")
    minutes = config.get("JWT_ACCESS_TOKEN_MINUTES")
    if not isinstance(minutes, int) or minutes <= 0:
        raise ConfigurationError("JWT_ACCESS_TOKEN_MINUTES must be a positive integer.")
