"""Contact routes: routes website inquiries to the right department mailbox."""

import logging
import time
from typing import Optional

from fastapi import APIRouter, HTTPException, status, Depends, Request, Response
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from src.shared.auth.sessions import SessionContext, get_session_context
from src.shared.contact.dns_check import DomainResolver, get_domain_resolver
from src.shared.contact.input_validation import sanitize_inquiry, validate_inquiry
from src.shared.contact.mailer import MailDeliveryError, compose_message, get_mail_transport
from src.shared.contact.recipients import RecipientDirectoryError, load_recipient_directory, resolve_recipient
from src.shared.contact.schemas import ContactResponse, InquiryRequest
from src.shared.request_utils import get_client_ip, read_json_object
from src.shared.settings import Settings, get_settings

router = APIRouter(tags=["contact"])

RECEIVED_MESSAGE = "Message received"
SENT_MESSAGE = "Your message has been sent successfully. We will respond within 24 hours."


def rate_limit_wait(session: SessionContext, now: int, window: int) -> Optional[int]:
    """
    Seconds the session must still wait before submitting again, or None if it may submit.

    Only successful dispatches are recorded, so this is a per-session throttle,
    not a quota.
    """
    last = session.last_submit_time
    if last is None:
        return None
    elapsed = now - int(last)
    if elapsed < window:
        return window - elapsed
    return None


def submitted_too_fast(inquiry: InquiryRequest, now: int, min_fill_seconds: int) -> bool:
    """True when the form came back sooner than a person could have filled it in."""
    if inquiry.submitted_at is None:
        return False
    return (now - inquiry.submitted_at) < min_fill_seconds


@router.options("/contact-form", status_code=status.HTTP_204_NO_CONTENT)
async def contact_form_preflight():
    """CORS preflight; headers are added by the app middleware."""
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/contact-form", response_model=ContactResponse, status_code=status.HTTP_200_OK)
async def submit_contact_form(
    request: Request,
    session: SessionContext = Depends(get_session_context),
    settings: Settings = Depends(get_settings),
    resolver: DomainResolver = Depends(get_domain_resolver),
    transport=Depends(get_mail_transport)
):
    """
    Accept a website inquiry and email it to the department for its form type.

    Gates, in order:
    - Session rate limit: one successful message per CONTACT_RATE_LIMIT_SECONDS
    - Body must be a JSON object
    - Honeypot field and minimum fill time: bots get a success reply and no email
    - Sanitization and validation (name, email syntax and domain, phone)
    """
    now = int(time.time())

    wait = rate_limit_wait(session, now, settings.CONTACT_RATE_LIMIT_SECONDS)
    if wait is not None:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": f"Please wait {wait} seconds before submitting again.",
                "retry_after": wait
            },
            headers={"Retry-After": str(wait)}
        )

    try:
        directory = load_recipient_directory(settings.RECIPIENTS_FILE)
    except RecipientDirectoryError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server configuration error. Please contact us directly."
        )

    data = await read_json_object(request)
    if data is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid request format"
        )
    try:
        inquiry = InquiryRequest.model_validate(data)
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid request format"
        )

    # Bot checks answer like a real success so automated senders learn nothing.
    # They do not touch the rate limit.
    if inquiry.honeypot_filled():
        logging.info(f"Honeypot triggered from {get_client_ip(request)}, message dropped")
        return ContactResponse(success=True, message=RECEIVED_MESSAGE)

    if submitted_too_fast(inquiry, now, settings.CONTACT_MIN_FILL_SECONDS):
        logging.info(f"Form submitted too fast from {get_client_ip(request)}, message dropped")
        return ContactResponse(success=True, message=RECEIVED_MESSAGE)

    cleaned = sanitize_inquiry(inquiry)

    # DNS lookups block, keep them off the event loop
    errors = await run_in_threadpool(validate_inquiry, cleaned, resolver.has_mail_records)
    if errors:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": ". ".join(errors), "errors": errors}
        )

    recipient = resolve_recipient(directory, cleaned.form_type)
    msg = compose_message(
        cleaned,
        recipient,
        settings,
        client_ip=get_client_ip(request),
        user_agent=request.headers.get("User-Agent", "")
    )

    try:
        await run_in_threadpool(transport.send, msg)
    except MailDeliveryError as e:
        logging.error(
            f"Mail send failed for form_type={cleaned.form_type}, to={recipient}, from={cleaned.email}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to send message. Please contact us directly at {settings.FALLBACK_CONTACT_EMAIL}"
        )

    session.record_submission(now)
    logging.info(f"Contact form email sent for form_type={cleaned.form_type} to {recipient}")

    return ContactResponse(success=True, message=SENT_MESSAGE)
