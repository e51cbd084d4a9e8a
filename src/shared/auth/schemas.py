"""Pydantic schemas for admin authentication requests and responses."""

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """Login request schema."""
    username: str = ""
    password: str = ""


class MessageResponse(BaseModel):
    """Generic success response."""
    success: bool = True
    message: str


class SessionStatusResponse(BaseModel):
    """Answer to a session check."""
    authenticated: bool
