"""Admin authentication: credential checks and admin session lifecycle."""

import hmac
import logging
import time
from typing import Optional

import bcrypt

from src.shared.auth.sessions import SessionContext
from src.shared.settings import Settings

# Admin sessions expire 4 hours after login
ADMIN_SESSION_LIFETIME_SECONDS = 14400


class AdminAuthNotConfigured(Exception):
    """No admin password (plain or hashed) is configured."""


def _bcrypt_bytes(password: str) -> bytes:
    # Bcrypt has a 72-byte limit, so we truncate if necessary
    password_bytes = password.encode('utf-8')
    if len(password_bytes) > 72:
        # Truncate to 72 bytes, handling multi-byte characters
        truncated = password_bytes[:72]
        # Remove any incomplete trailing bytes
        while truncated and truncated[-1] & 0x80 and not (truncated[-1] & 0x40):
            truncated = truncated[:-1]
        password_bytes = truncated
    return password_bytes


def hash_password(password: str) -> str:
    """Hash a password using bcrypt (for producing ADMIN_PASSWORD_HASH)."""
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(_bcrypt_bytes(password), salt)
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its bcrypt hash."""
    try:
        return bcrypt.checkpw(_bcrypt_bytes(plain_password), hashed_password.encode('utf-8'))
    except ValueError:
        logging.error("ADMIN_PASSWORD_HASH is not a valid bcrypt hash")
        return False


def credentials_match(username: str, password: str, settings: Settings) -> bool:
    """
    Compare a username/password pair against the configured admin credentials.

    ADMIN_PASSWORD_HASH takes precedence over ADMIN_PASSWORD.

    Raises:
        AdminAuthNotConfigured if neither password setting is present
    """
    if not settings.ADMIN_PASSWORD_HASH and not settings.ADMIN_PASSWORD:
        raise AdminAuthNotConfigured()

    username_ok = hmac.compare_digest(username.encode('utf-8'), settings.ADMIN_USERNAME.encode('utf-8'))
    if settings.ADMIN_PASSWORD_HASH:
        password_ok = verify_password(password, settings.ADMIN_PASSWORD_HASH)
    else:
        password_ok = hmac.compare_digest(password.encode('utf-8'), settings.ADMIN_PASSWORD.encode('utf-8'))
    return username_ok and password_ok


def login(session: SessionContext, username: str, password: str, settings: Settings,
          now: Optional[float] = None) -> bool:
    """
    Attempt an admin login.

    On success the session becomes authenticated. On failure the call blocks for
    ADMIN_LOGIN_FAILURE_DELAY seconds before returning False, to slow down
    password guessing.
    """
    if credentials_match(username.strip(), password, settings):
        session.start_admin_session(now if now is not None else time.time())
        return True

    if settings.ADMIN_LOGIN_FAILURE_DELAY > 0:
        time.sleep(settings.ADMIN_LOGIN_FAILURE_DELAY)
    return False


def logout(session: SessionContext) -> None:
    session.destroy()


def check_session(session: SessionContext, now: Optional[float] = None,
                  lifetime: int = ADMIN_SESSION_LIFETIME_SECONDS) -> bool:
    """
    Return True if the session holds a live admin login.

    An expired login destroys the session before False is returned.
    """
    if not session.admin_logged_in:
        return False

    login_time = session.admin_login_time
    if login_time is not None:
        now = now if now is not None else time.time()
        if now - login_time > lifetime:
            logging.info("Admin session expired")
            session.destroy()
            return False

    return True
