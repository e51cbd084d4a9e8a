"""Helpers for reading raw requests."""

import json
from typing import Optional

from fastapi import Request


def get_client_ip(request: Request) -> str:
    """Get client IP address, honouring a proxy's X-Forwarded-For header."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # Take the first IP in the chain
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "Unknown"


async def read_json_object(request: Request) -> Optional[dict]:
    """
    Parse the request body as a JSON object.

    Returns None when the body is empty, not valid JSON, or valid JSON that is
    not an object (a list, a string, a number...).
    """
    raw = await request.body()
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except (ValueError, UnicodeDecodeError):
        return None
    return data if isinstance(data, dict) else None
