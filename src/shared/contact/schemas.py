"""Pydantic schemas for the contact form API."""

import math
import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


class InquiryRequest(BaseModel):
    """
    Raw contact form submission, as posted by the front-end.

    Every field is optional. Text fields that arrive as something other than a
    string are treated as empty; sanitization happens afterwards.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    email: str = ""
    phone: str = ""
    company: str = ""
    message: str = ""
    form_type: str = ""
    division: str = ""
    product: str = ""
    # Hidden field; real visitors never fill it in
    website: Any = None
    # Client clock when the form was rendered, epoch seconds
    submitted_at: Optional[int] = Field(default=None, alias="_ts")

    @field_validator('name', 'email', 'phone', 'company', 'message', 'form_type', 'division', 'product',
                     mode='before')
    @classmethod
    def coerce_text(cls, v):
        return v if isinstance(v, str) else ""

    @field_validator('submitted_at', mode='before')
    @classmethod
    def coerce_timestamp(cls, v):
        """Lenient integer parsing: numeric prefixes count, anything else is 0."""
        if v is None:
            return None
        if isinstance(v, bool):
            return int(v)
        if isinstance(v, int):
            return v
        if isinstance(v, float):
            return int(v) if math.isfinite(v) else 0
        if isinstance(v, str):
            match = _LEADING_INT.match(v)
            return int(match.group(1)) if match else 0
        return 0

    def honeypot_filled(self) -> bool:
        return self.website not in (None, "", "0", 0, False, [], {})


class SanitizedInquiry(BaseModel):
    """Contact form submission after sanitization; safe to put in an email."""
    name: str
    email: str
    phone: str = ""
    company: str = ""
    message: str = ""
    form_type: str = "general"
    division: str = ""
    product: str = ""


class ContactResponse(BaseModel):
    """Schema for contact form response."""
    success: bool
    message: str
