import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default):
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return int(value)


class Config:
    # Runtime
    PORT = _env_int("PORT", 3002)
    APP_ENV = (os.getenv("APP_ENV") or os.getenv("FLASK_ENV") or os.getenv("NODE_ENV") or "development").lower()

    # Frontend allowed for CORS and returned after login
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

    # SQLite database file stored next to the service as auth.sqlite
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "auth.sqlite")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Schema comes from `flask db upgrade` unless this is switched on
    AUTO_CREATE_TABLES = _env_bool("AUTO_CREATE_TABLES", False)

    # Shared passphrase. A bcrypt hash, when given, wins over the literal.
    LOGIN_PASSPHRASE = os.getenv("LOGIN_PASSPHRASE", "dndforever")
    LOGIN_PASSPHRASE_HASH = os.getenv("LOGIN_PASSPHRASE_HASH")
    BCRYPT_ROUNDS = _env_int("BCRYPT_ROUNDS", 12)

    # Auth cookie
    AUTH_COOKIE_NAME = "auth_token"
    AUTH_COOKIE_MAX_AGE = 10 * 365 * 24 * 60 * 60
    AUTH_COOKIE_SAMESITE = "Strict"
    SESSION_COOKIE_SECURE = APP_ENV == "production"

    # Tokens never expire unless a lifetime is configured
    AUTH_TOKEN_TTL_SECONDS = _env_int("AUTH_TOKEN_TTL_SECONDS", None)

    # Login rate gate: 5 requests per 10 seconds
    LOGIN_RATE_WINDOW_SECONDS = _env_int("LOGIN_RATE_WINDOW_SECONDS", 10)
    LOGIN_RATE_MAX_REQUESTS = _env_int("LOGIN_RATE_MAX_REQUESTS", 5)
    LOGIN_RATE_SCOPE = os.getenv("LOGIN_RATE_SCOPE", "global")  # "global" or "ip"

    # Brute-force protection
    MAX_FAILED_ATTEMPTS = _env_int("MAX_FAILED_ATTEMPTS", 5)
    FAILED_ATTEMPT_WINDOW_SECONDS = _env_int("FAILED_ATTEMPT_WINDOW_SECONDS", 60 * 60)
    BLOCK_DURATION_SECONDS = _env_int("BLOCK_DURATION_SECONDS", 7 * 24 * 60 * 60)

    # Only trust X-Forwarded-For behind a known reverse proxy
    TRUST_PROXY_HEADERS = _env_bool("TRUST_PROXY_HEADERS", False)

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LOG_FILE")

    # Used by resource services that guard their routes with this gatekeeper
    GATEKEEPER_URL = os.getenv("GATEKEEPER_URL", "http://localhost:3002")
    GATEKEEPER_TIMEOUT_SECONDS = float(os.getenv("GATEKEEPER_TIMEOUT_SECONDS", "5"))

    # Basic app settings
    DEBUG = False
