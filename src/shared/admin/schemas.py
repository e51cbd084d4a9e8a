"""Pydantic schemas for the site mode admin API."""

from typing import Any

from pydantic import BaseModel

from src.shared.site_mode.store import SiteMode


class SetModeRequest(BaseModel):
    """Body of a set_mode call. The mode is checked by the route, not here."""
    mode: Any = ""


class ModeResponse(BaseModel):
    mode: SiteMode


class SetModeResponse(BaseModel):
    success: bool = True
    mode: SiteMode
    message: str
