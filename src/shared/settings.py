"""Service configuration loaded from environment variables."""

import os
import logging
import secrets
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file (for local development)
load_dotenv()

DEFAULT_ALLOWED_ORIGINS = [
    "https://themahalaxmigroup.com",
    "https://www.themahalaxmigroup.com",
    "http://localhost:3000",  # dev only
    "http://localhost:5173",  # dev only
]


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: List[str]) -> List[str]:
    value = os.environ.get(name)
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings:
    """Runtime settings. Every value has an environment variable of the same name."""

    def __init__(self, **overrides):
        # Sessions
        self.SESSION_SECRET_KEY: str = os.environ.get("SESSION_SECRET_KEY", "")
        self.SESSION_COOKIE_NAME: str = os.environ.get("SESSION_COOKIE_NAME", "mahalaxmi_session")
        self.SESSION_MAX_AGE: int = int(os.environ.get("SESSION_MAX_AGE", "14400"))
        self.SESSION_HTTPS_ONLY: bool = _env_bool("SESSION_HTTPS_ONLY", False)
        self.ALLOWED_ORIGINS: List[str] = _env_list("ALLOWED_ORIGINS", DEFAULT_ALLOWED_ORIGINS)

        # Admin credential pair
        self.ADMIN_USERNAME: str = os.environ.get("ADMIN_USERNAME", "admin")
        self.ADMIN_PASSWORD_HASH: Optional[str] = os.environ.get("ADMIN_PASSWORD_HASH") or None
        self.ADMIN_PASSWORD: Optional[str] = os.environ.get("ADMIN_PASSWORD") or None
        self.ADMIN_LOGIN_FAILURE_DELAY: float = float(os.environ.get("ADMIN_LOGIN_FAILURE_DELAY", "1.0"))
        self.ADMIN_SESSION_LIFETIME: int = int(os.environ.get("ADMIN_SESSION_LIFETIME", "14400"))

        # Site mode storage
        self.SITE_MODE_FILE: str = os.environ.get("SITE_MODE_FILE", os.path.join("data", "site-mode.json"))
        self.SITE_MODE_DATABASE_URL: Optional[str] = os.environ.get("SITE_MODE_DATABASE_URL") or None

        # Contact form
        self.RECIPIENTS_FILE: Optional[str] = os.environ.get("RECIPIENTS_FILE") or None
        self.CONTACT_RATE_LIMIT_SECONDS: int = int(os.environ.get("CONTACT_RATE_LIMIT_SECONDS", "30"))
        self.CONTACT_MIN_FILL_SECONDS: int = int(os.environ.get("CONTACT_MIN_FILL_SECONDS", "3"))

        # Outgoing mail
        self.SITE_NAME: str = os.environ.get("SITE_NAME", "Mahalaxmi Group Website")
        self.MAIL_FROM_ADDRESS: str = os.environ.get("MAIL_FROM_ADDRESS", "noreply@themahalaxmigroup.com")
        self.MAIL_FROM_NAME: str = os.environ.get("MAIL_FROM_NAME", "Mahalaxmi Website")
        self.MAIL_SUBJECT_PREFIX: str = os.environ.get("MAIL_SUBJECT_PREFIX", "[Mahalaxmi Website]")
        self.FALLBACK_CONTACT_EMAIL: str = os.environ.get("FALLBACK_CONTACT_EMAIL", "info@themahalaxmigroup.com")
        self.SMTP_HOST: str = os.environ.get("SMTP_HOST", "localhost")
        self.SMTP_PORT: int = int(os.environ.get("SMTP_PORT", "25"))
        self.SMTP_USER: Optional[str] = os.environ.get("SMTP_USER") or None
        self.SMTP_PASSWORD: Optional[str] = os.environ.get("SMTP_PASSWORD") or None
        self.SMTP_USE_TLS: bool = _env_bool("SMTP_USE_TLS", False)
        self.SMTP_TIMEOUT: float = float(os.environ.get("SMTP_TIMEOUT", "10"))

        self.LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise AttributeError(f"Unknown setting: {key}")
            setattr(self, key, value)

        if not self.SESSION_SECRET_KEY:
            logging.warning(
                "SESSION_SECRET_KEY environment variable is not set. "
                "Using a random key; admin sessions will not survive a restart."
            )
            self.SESSION_SECRET_KEY = secrets.token_urlsafe(32)


@lru_cache()
def get_settings() -> Settings:
    """Dependency returning the process-wide settings."""
    return Settings()
