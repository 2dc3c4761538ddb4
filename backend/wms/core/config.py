"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

# Placeholder secrets that must never reach production
INSECURE_SECRETS: Final[frozenset[str]] = frozenset({"", "CHANGE_ME", "CHANGE_ME_JWT"})


# Load .env in development (no-op when the file is missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back on garbage."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    try:
        return int(val)
    except ValueError:
        return default


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret. Not used for token signing.
    JWT_SECRET_KEY: str
        HMAC secret for access tokens. Read once at startup; rotating it
        invalidates every outstanding access token.
    JWT_ALGORITHM: str
        Symmetric signing algorithm. Tokens announcing anything else are
        rejected on verification.
    JWT_ISSUER: str
        ``iss`` claim minted into, and required from, access tokens.
    ACCESS_TOKEN_TTL_SECONDS: int
        Access token lifetime (15 minutes).
    REFRESH_TOKEN_TTL_SECONDS: int
        Refresh session lifetime (7 days).
    AUTH_COOKIE_NAME: str
        Cookie consulted for the access token when no ``Authorization``
        header is present.
    REFRESH_COOKIE_NAME: str
        Cookie consulted for the caller's refresh token when listing sessions.
    PASSWORD_HASH_METHOD: str
        Method string forwarded to :func:`werkzeug.security.generate_password_hash`.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    DB_POOL_TIMEOUT: int
        Seconds to wait for a pooled connection before failing the request.
    DB_STATEMENT_TIMEOUT_MS: int
        Per-statement deadline applied on PostgreSQL connections.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "CHANGE_ME_JWT")
    JWT_ALGORITHM = "HS256"
    JWT_ISSUER = os.getenv("JWT_ISSUER", "wms-lite")
    ACCESS_TOKEN_TTL_SECONDS = env_int("ACCESS_TOKEN_TTL_SECONDS", 15 * 60)
    REFRESH_TOKEN_TTL_SECONDS = env_int("REFRESH_TOKEN_TTL_SECONDS", 7 * 24 * 60 * 60)
    AUTH_COOKIE_NAME = os.getenv("AUTH_COOKIE_NAME", "access_token")
    REFRESH_COOKIE_NAME = os.getenv("REFRESH_COOKIE_NAME", "refresh_token")
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    DB_POOL_TIMEOUT = env_int("DB_POOL_TIMEOUT", 5)
    DB_STATEMENT_TIMEOUT_MS = env_int("DB_STATEMENT_TIMEOUT_MS", 5000)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Uses a cheap password hash so suites stay fast.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    JWT_SECRET_KEY = "testing-secret-key-with-at-least-32-bytes"
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    PROPAGATE_EXCEPTIONS = False
    USE_PROXYFIX = False


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    ``JWT_SECRET_KEY`` must be provided through the environment; the factory
    refuses to start with a placeholder secret.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
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


def ensure_secure(config: Mapping[str, Any]) -> None:
    """Refuse to boot a non-debug, non-testing app with placeholder secrets.

    :param config: Loaded Flask configuration.
    :raises RuntimeError: If ``JWT_SECRET_KEY`` is missing or a placeholder.
    """
    if config.get("DEBUG") or config.get("TESTING"):
        return
    if str(config.get("JWT_SECRET_KEY") or "") in INSECURE_SECRETS:
        raise RuntimeError("JWT_SECRET_KEY is not set")


def build_engine_options(config: Mapping[str, Any]) -> dict[str, Any]:
    """Derive SQLAlchemy engine options enforcing per-request deadlines.

    SQLite (tests, local dev) uses a static/singleton pool that rejects pool
    arguments, so options are only produced for server databases.
    """
    uri = str(config.get("SQLALCHEMY_DATABASE_URI") or "")
    if uri.startswith("sqlite"):
        return {}
    options: dict[str, Any] = {
        "pool_pre_ping": True,
        "pool_timeout": int(config.get("DB_POOL_TIMEOUT", 5)),
    }
    if uri.startswith("postgresql"):
        timeout_ms = int(config.get("DB_STATEMENT_TIMEOUT_MS", 5000))
        options["connect_args"] = {"options": f"-c statement_timeout={timeout_ms}"}
    return options
