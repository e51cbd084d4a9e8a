"""Admin authentication dependencies."""

from fastapi import Depends, HTTPException, status

from src.shared.auth.auth import check_session
from src.shared.auth.sessions import SessionContext, get_session_context
from src.shared.settings import Settings, get_settings


def verify_admin(
    session: SessionContext = Depends(get_session_context),
    settings: Settings = Depends(get_settings)
) -> SessionContext:
    """
    Verify admin access: the session must hold a live admin login.

    Expired logins are destroyed by the check and rejected like anonymous ones.

    Returns the session if the check passes.
    Raises HTTPException(401) otherwise.
    """
    if not check_session(session, lifetime=settings.ADMIN_SESSION_LIFETIME):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )
    return session
