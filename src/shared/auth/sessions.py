"""Per-client session state passed explicitly into the contact and admin flows."""

from typing import MutableMapping, Optional

from fastapi import Request

LAST_SUBMIT_KEY = "last_submit_time"
ADMIN_LOGGED_IN_KEY = "admin_logged_in"
ADMIN_LOGIN_TIME_KEY = "admin_login_time"


class SessionContext:
    """
    Typed view over a client's session mapping.

    In the running app the mapping is Starlette's signed-cookie session
    (``request.session``); tests can pass a plain dict.
    """

    def __init__(self, data: Optional[MutableMapping] = None):
        self._data = data if data is not None else {}

    @property
    def last_submit_time(self) -> Optional[float]:
        value = self._data.get(LAST_SUBMIT_KEY)
        return float(value) if value is not None else None

    def record_submission(self, now: float) -> None:
        self._data[LAST_SUBMIT_KEY] = int(now)

    @property
    def admin_logged_in(self) -> bool:
        return self._data.get(ADMIN_LOGGED_IN_KEY) is True

    @property
    def admin_login_time(self) -> Optional[float]:
        value = self._data.get(ADMIN_LOGIN_TIME_KEY)
        return float(value) if value is not None else None

    def start_admin_session(self, now: float) -> None:
        self._data[ADMIN_LOGGED_IN_KEY] = True
        self._data[ADMIN_LOGIN_TIME_KEY] = int(now)

    def destroy(self) -> None:
        """Drop everything held for this client, rate-limit state included."""
        self._data.clear()


def get_session_context(request: Request) -> SessionContext:
    """Dependency wrapping the request's session."""
    return SessionContext(request.session)
