"""
Input sanitization and validation for contact form submissions.
Protects against XSS, header injection and junk submissions.
"""

import re
import html
from typing import Any, Callable, List, Optional

from email_validator import validate_email as _check_email_syntax, EmailNotValidError

from src.shared.contact.schemas import InquiryRequest, SanitizedInquiry


# Maximum lengths for each free-text field
MAX_NAME_LENGTH = 200
MAX_EMAIL_LENGTH = 254
MAX_PHONE_LENGTH = 20
MAX_COMPANY_LENGTH = 200
MAX_MESSAGE_LENGTH = 2000
MAX_FORM_TYPE_LENGTH = 50
MAX_DIVISION_LENGTH = 200
MAX_PRODUCT_LENGTH = 200

DEFAULT_FORM_TYPE = "general"

# Digits, spaces, +, -, and parentheses; covers international formats
PHONE_PATTERN = re.compile(r'^[0-9\s+\-()]{6,20}$', re.ASCII)

# A "<" only opens a tag when followed by a letter, "/", "!" or "?"
_TAG_PATTERN = re.compile(r'<(?=[A-Za-z/!?])[^>]*>?')
_COMMENT_PATTERN = re.compile(r'<!--.*?(-->|$)', re.DOTALL)

# Everything outside the characters allowed in an address
_EMAIL_DISALLOWED = re.compile(r"[^A-Za-z0-9!#$%&'*+\-=?^_`{|}~@.\[\]]")


def strip_tags(text: str) -> str:
    """Remove HTML/XML tags and comments; an unterminated tag runs to the end of the text."""
    text = _COMMENT_PATTERN.sub('', text)
    return _TAG_PATTERN.sub('', text)


def sanitize_text(text: Any, max_length: Optional[int] = None) -> str:
    """
    Sanitize a free-text field.

    Trims, truncates to max_length, strips markup and escapes HTML-significant
    characters (including both quote styles). Non-string input becomes "".
    """
    if not isinstance(text, str) or not text:
        return ""

    text = text.strip()

    if max_length and len(text) > max_length:
        text = text[:max_length]

    text = strip_tags(text)

    return html.escape(text, quote=True)


def sanitize_email(email: Any) -> str:
    """Trim and drop every character that cannot appear in an email address."""
    if not isinstance(email, str):
        return ""
    return _EMAIL_DISALLOWED.sub('', email.strip())


def is_valid_email(email: str) -> bool:
    """Syntax-only email check; deliverability is checked separately."""
    if not email or len(email) > MAX_EMAIL_LENGTH:
        return False
    try:
        _check_email_syntax(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_valid_phone(phone: str) -> bool:
    return bool(PHONE_PATTERN.match(phone))


def email_domain(email: str) -> str:
    """Part after the last "@", or "" if there is none."""
    if "@" not in email:
        return ""
    return email.rsplit("@", 1)[1]


def sanitize_inquiry(inquiry: InquiryRequest) -> SanitizedInquiry:
    """Apply per-field sanitization and length caps."""
    return SanitizedInquiry(
        name=sanitize_text(inquiry.name, MAX_NAME_LENGTH),
        email=sanitize_email(inquiry.email),
        phone=sanitize_text(inquiry.phone, MAX_PHONE_LENGTH),
        company=sanitize_text(inquiry.company, MAX_COMPANY_LENGTH),
        message=sanitize_text(inquiry.message, MAX_MESSAGE_LENGTH),
        form_type=sanitize_text(inquiry.form_type, MAX_FORM_TYPE_LENGTH) or DEFAULT_FORM_TYPE,
        division=sanitize_text(inquiry.division, MAX_DIVISION_LENGTH),
        product=sanitize_text(inquiry.product, MAX_PRODUCT_LENGTH),
    )


def validate_inquiry(inquiry: SanitizedInquiry, domain_resolves: Callable[[str], bool]) -> List[str]:
    """
    Validate a sanitized inquiry.

    Args:
        inquiry: Sanitized inquiry
        domain_resolves: Returns True when a domain has an MX or A record

    Returns:
        Every validation error found, in field order; empty when valid
    """
    errors = []

    if not inquiry.name:
        errors.append("Name is required")

    if not is_valid_email(inquiry.email):
        errors.append("A valid email address is required")
    else:
        domain = email_domain(inquiry.email)
        if domain and not domain_resolves(domain):
            errors.append("Please provide a valid email address")

    if inquiry.phone and not is_valid_phone(inquiry.phone):
        errors.append("Please enter a valid phone number")

    return errors
