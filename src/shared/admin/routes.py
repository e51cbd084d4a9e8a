"""Admin routes for reading and toggling the site mode."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status, Query, Request, Response

from src.shared.admin.dependencies import verify_admin
from src.shared.admin.schemas import ModeResponse, SetModeRequest, SetModeResponse
from src.shared.auth.sessions import SessionContext, get_session_context
from src.shared.request_utils import read_json_object
from src.shared.settings import Settings, get_settings
from src.shared.site_mode.store import (
    SiteModeRecord,
    SiteModeStore,
    StorageWriteError,
    get_site_mode_store,
    parse_mode
)

router = APIRouter(tags=["admin"])


@router.options("/admin-api", status_code=status.HTTP_204_NO_CONTENT)
async def admin_api_preflight():
    """CORS preflight; headers are added by the app middleware."""
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.api_route("/admin-api", methods=["GET", "POST"])
async def admin_api(
    request: Request,
    action: str = Query(""),
    session: SessionContext = Depends(get_session_context),
    settings: Settings = Depends(get_settings),
    store: SiteModeStore = Depends(get_site_mode_store)
):
    """
    Dispatch on ``?action=``:

    - ``get_mode`` (public): ``{mode}``
    - ``set_mode`` (POST, admin session required): body ``{mode}``
    """
    if action == "get_mode":
        return ModeResponse(mode=store.get())

    if action == "set_mode" and request.method == "POST":
        verify_admin(session, settings)
        return await _set_mode(request, store)

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Unknown action"
    )


async def _set_mode(request: Request, store: SiteModeStore) -> SetModeResponse:
    data = await read_json_object(request) or {}
    new_mode = parse_mode(SetModeRequest.model_validate(data).mode)
    if new_mode is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid mode. Use group_only or full_access."
        )

    try:
        record = store.set(new_mode, actor="admin")
    except StorageWriteError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update mode. Check file permissions."
        )

    logging.info(f"Site mode updated to {record.mode.value} by {record.updated_by}")
    return SetModeResponse(
        mode=record.mode,
        message=f"Site mode updated to: {record.mode.value}"
    )


@router.get("/admin/data/site-mode.json", response_model=SiteModeRecord)
async def site_mode_record(store: SiteModeStore = Depends(get_site_mode_store)):
    """The full stored record, for front-ends that read the flag file directly."""
    return store.read()
