# config.py - configuration constants
import os

from dotenv import load_dotenv

# Pick up DATABASE_URL & friends from a local .env before Config is evaluated
load_dotenv()

# Connection strings copied from the setup docs still carry this marker
PLACEHOLDER_MARKER = "your-"


class ConfigurationError(RuntimeError):
    """Raised at startup when required configuration is missing or unusable."""


def database_url() -> str:
    """Return DATABASE_URL, refusing a missing, blank or placeholder value."""
    url = (os.getenv("DATABASE_URL") or "").strip()
    if not url:
        raise ConfigurationError("DATABASE_URL is not set; point it at the questions database.")
    if PLACEHOLDER_MARKER in url:
        raise ConfigurationError(
            "DATABASE_URL still contains a placeholder; replace it with your real connection string."
        )
    return url


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "supersecretkey")
    # SQLALCHEMY_DATABASE_URI is filled in by create_app via database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # - pool_pre_ping checks connections before use to avoid stale/expired sockets
    # - pool_recycle forces periodic reconnects to reduce SSL/idle issues
    # - pool_timeout controls how long to wait for a connection from the pool
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": int(os.getenv("SQLALCHEMY_POOL_RECYCLE", "280")),
        "pool_timeout": int(os.getenv("SQLALCHEMY_POOL_TIMEOUT", "10")),
    }

    # Quiz behaviour
    QUIZ_SIZE = 5
    # Reset every question to unused whenever a new quiz starts (off by default)
    QUIZ_RESET_ON_START = os.getenv("QUIZ_RESET_ON_START", "0") == "1"

    PORT = 5000

    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = os.getenv("SESSION_COOKIE_SAMESITE", "Lax")
    # Don't force Secure cookies locally unless explicitly enabled
    SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "0") == "1"
