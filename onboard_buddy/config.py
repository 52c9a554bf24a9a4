"""Centralized configuration for the Onboard Buddy backend.

Typed constants read from ONBOARD_* environment variables. Every value has a
safe default so the service starts without any env configuration.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# .env values never override variables already set in the environment
load_dotenv()

# Project paths
PACKAGE_ROOT = Path(__file__).parent
PROJECT_ROOT = PACKAGE_ROOT.parent


def _env(key: str, default: str) -> str:
    return os.getenv(key, default)


def _env_list(key: str, default: str = "") -> list[str]:
    raw = os.getenv(key, default)
    return [part.strip().lower() for part in raw.split(",") if part.strip()]


# --- App ---
APP_VERSION: str = "1.0.0"
ENV: str = _env("ONBOARD_ENV", "development")
DEBUG: bool = ENV == "development"
LOG_LEVEL: str = _env("ONBOARD_LOG_LEVEL", "INFO")

# --- API ---
API_HOST: str = _env("API_HOST", "0.0.0.0")
API_PORT: int = int(_env("API_PORT", "8000"))

# --- Database ---
DB_PATH: Path = Path(_env("ONBOARD_DB_PATH", str(PACKAGE_ROOT / "data" / "onboard_buddy.db")))
DB_CONNECT_TIMEOUT: float = float(_env("ONBOARD_DB_CONNECT_TIMEOUT", "30.0"))
DB_RETRY_MAX: int = int(_env("ONBOARD_DB_RETRY_MAX", "5"))
DB_RETRY_BASE_DELAY: float = float(_env("ONBOARD_DB_RETRY_BASE_DELAY", "0.1"))
DB_RETRY_MAX_DELAY: float = float(_env("ONBOARD_DB_RETRY_MAX_DELAY", "2.0"))
DB_RETRY_JITTER: float = float(_env("ONBOARD_DB_RETRY_JITTER", "0.1"))

# --- Calendar ---
TIMEZONE: str = _env("ONBOARD_TIMEZONE", "UTC")

# --- Notifications ---
NOTIFICATION_MAX: int = int(_env("ONBOARD_NOTIFICATION_MAX", "50"))
NOTIFICATION_THROTTLE_SECONDS: float = float(_env("ONBOARD_NOTIFICATION_THROTTLE_SECONDS", "5"))
NOTIFICATION_DUPLICATE_WINDOW_SECONDS: float = float(
    _env("ONBOARD_NOTIFICATION_DUPLICATE_WINDOW_SECONDS", "60")
)
DUE_SOON_WINDOW_DAYS: int = int(_env("ONBOARD_DUE_SOON_WINDOW_DAYS", "2"))
DUE_DATE_SWEEP_SECONDS: int = int(_env("ONBOARD_DUE_DATE_SWEEP_SECONDS", "300"))

# --- Missions ---
MISSION_DEADLINE_MAX_DAYS: int = 90

# --- Tasks (business days) ---
TASK_DEFAULT_DURATION_DAYS: int = 5
TASK_MIN_DURATION_DAYS: int = 1
TASK_MAX_DURATION_DAYS: int = 30

# --- Images / object storage ---
IMAGE_MAX_BYTES: int = int(_env("ONBOARD_IMAGE_MAX_BYTES", str(5 * 1024 * 1024)))
IMAGE_BUCKET: str = _env("ONBOARD_IMAGE_BUCKET", "onboard-buddy-images")
GCP_PROJECT: str | None = os.getenv("GCP_PROJECT")
ORPHAN_IMAGE_MAX_AGE_DAYS: int = 7
CLEANUP_MAX_WORKERS: int = int(_env("ONBOARD_CLEANUP_MAX_WORKERS", "2"))
DEFAULT_WELCOME_BACKGROUND: str = (
    "https://cameronstewart.click/onboardingbuddy/onboarding-buddy-cover-image.jpg"
)

# --- Auth ---
AUTH_BASE_URL: str = _env("ONBOARD_AUTH_BASE_URL", "http://localhost:54321")
AUTH_API_KEY: str = _env("ONBOARD_AUTH_API_KEY", "")
AUTH_TIMEOUT_SECONDS: float = float(_env("ONBOARD_AUTH_TIMEOUT_SECONDS", "10"))
AUTH_CACHE_TTL_SECONDS: int = 600
AUTH_CACHE_MAX_SIZE: int = 1000
SUPER_ADMIN_EMAILS: list[str] = _env_list("ONBOARD_SUPER_ADMIN_EMAILS")

# --- Billing webhook ---
WEBHOOK_SECRET: str = _env("ONBOARD_WEBHOOK_SECRET", "")
WEBHOOK_TOLERANCE_SECONDS: int = 300


def is_production() -> bool:
    """Check if running in production"""
    return ENV == "production"


def is_development() -> bool:
    """Check if running in development"""
    return ENV == "development"
