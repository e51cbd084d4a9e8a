"""Admin authentication routes: login, logout and session check."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status, Query, Request, Response
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from src.shared.auth import auth
from src.shared.auth.auth import AdminAuthNotConfigured
from src.shared.auth.schemas import LoginRequest, MessageResponse, SessionStatusResponse
from src.shared.auth.sessions import SessionContext, get_session_context
from src.shared.request_utils import get_client_ip, read_json_object
from src.shared.settings import Settings, get_settings

router = APIRouter(tags=["admin-auth"])


@router.options("/admin-auth", status_code=status.HTTP_204_NO_CONTENT)
async def admin_auth_preflight():
    """CORS preflight; headers are added by the app middleware."""
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.api_route("/admin-auth", methods=["GET", "POST"])
async def admin_auth(
    request: Request,
    action: str = Query(""),
    session: SessionContext = Depends(get_session_context),
    settings: Settings = Depends(get_settings)
):
    """
    Dispatch on ``?action=``:

    - ``login`` (POST): body ``{username, password}``
    - ``logout`` (GET or POST)
    - ``check`` (GET or POST): ``{authenticated: bool}``
    """
    if action == "login" and request.method == "POST":
        return await _login(request, session, settings)

    if action == "logout":
        auth.logout(session)
        return MessageResponse(message="Logged out")

    if action == "check":
        authenticated = auth.check_session(session, lifetime=settings.ADMIN_SESSION_LIFETIME)
        return SessionStatusResponse(authenticated=authenticated)

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Unknown action"
    )


async def _login(request: Request, session: SessionContext, settings: Settings) -> MessageResponse:
    data = await read_json_object(request)
    if data is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid request"
        )
    try:
        login_data = LoginRequest.model_validate(data)
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid request"
        )

    try:
        # Blocking sleep on failure, keep it off the event loop
        ok = await run_in_threadpool(
            auth.login, session, login_data.username, login_data.password, settings
        )
    except AdminAuthNotConfigured:
        logging.error("Admin login attempted but no admin password is configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Admin authentication not configured"
        )

    if not ok:
        logging.warning(f"Failed admin login from {get_client_ip(request)}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    logging.info(f"Admin logged in from {get_client_ip(request)}")
    return MessageResponse(message="Login successful")
