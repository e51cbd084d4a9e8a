"""Composing and sending contact form emails."""

import re
import smtplib
from datetime import datetime, timezone
from email import policy
from email.mime.text import MIMEText
from email.utils import formataddr, formatdate, make_msgid
from typing import Optional

from fastapi import Depends

from src.shared.contact.recipients import form_label
from src.shared.contact.schemas import SanitizedInquiry
from src.shared.settings import Settings, get_settings

MAX_USER_AGENT_LENGTH = 150
X_MAILER = "MahalaxmiGroupWebsite/2.0"

_LINE_BREAKS = re.compile(r'[\r\n]+')

RULE = "=" * 44
DIVIDER = "-" * 42


class MailDeliveryError(Exception):
    """The mail transport refused or failed to deliver a message."""


def header_safe(value: str) -> str:
    """Collapse line breaks so user input cannot start a new header."""
    return _LINE_BREAKS.sub(' ', value).strip()


def build_subject(inquiry: SanitizedInquiry, settings: Settings) -> str:
    return header_safe(f"{settings.MAIL_SUBJECT_PREFIX} {form_label(inquiry.form_type)} from {inquiry.name}")


def build_body(inquiry: SanitizedInquiry, settings: Settings, client_ip: str,
               user_agent: str, now: Optional[datetime] = None) -> str:
    """Plain-text email body listing every submitted field plus request metadata."""
    now = now or datetime.now(timezone.utc)
    label = form_label(inquiry.form_type)

    lines = [
        RULE,
        f"  NEW INQUIRY - {label}",
        RULE,
        "",
        f"Name:         {inquiry.name}",
        f"Email:        {inquiry.email}",
        f"Phone:        {inquiry.phone or 'Not provided'}",
        f"Company:      {inquiry.company or 'Not provided'}",
        f"Form Type:    {label}",
    ]
    if inquiry.division:
        lines.append(f"Division:     {inquiry.division}")
    if inquiry.product:
        lines.append(f"Product:      {inquiry.product}")

    lines += [
        "",
        "Message:",
        DIVIDER,
        inquiry.message,
        DIVIDER,
        "",
        f"Sent from:    {settings.SITE_NAME}",
        f"Date:         {now.strftime('%Y-%m-%d %H:%M:%S UTC')}",
        f"IP Address:   {client_ip or 'Unknown'}",
        f"User Agent:   {(user_agent or 'Unknown')[:MAX_USER_AGENT_LENGTH]}",
        "",
    ]
    return "\n".join(lines)


def compose_message(inquiry: SanitizedInquiry, recipient: str, settings: Settings,
                    client_ip: str, user_agent: str) -> MIMEText:
    """
    Build the outgoing email.

    From is always the server's own address; the visitor only appears in
    Reply-To, so replies go straight to them without spoofing their domain.
    """
    msg = MIMEText(build_body(inquiry, settings, client_ip, user_agent), 'plain', 'utf-8', policy=policy.SMTP)
    msg['From'] = formataddr((settings.MAIL_FROM_NAME, settings.MAIL_FROM_ADDRESS))
    msg['To'] = recipient
    msg['Reply-To'] = formataddr((header_safe(inquiry.name), inquiry.email))
    msg['Subject'] = build_subject(inquiry, settings)
    msg['Date'] = formatdate(localtime=False)
    msg['Message-ID'] = make_msgid(domain=settings.MAIL_FROM_ADDRESS.rsplit("@", 1)[-1])
    msg['X-Mailer'] = X_MAILER
    msg['X-Priority'] = "3"
    return msg


class SmtpMailTransport:
    """Sends messages through an SMTP relay (a local MTA by default)."""

    def __init__(self, settings: Settings):
        self.host = settings.SMTP_HOST
        self.port = settings.SMTP_PORT
        self.user = settings.SMTP_USER
        self.password = settings.SMTP_PASSWORD
        self.use_tls = settings.SMTP_USE_TLS
        self.timeout = settings.SMTP_TIMEOUT

    def send(self, msg: MIMEText) -> None:
        """
        Deliver one message.

        Raises:
            MailDeliveryError on any connection, authentication or SMTP error
        """
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()  # Enable encryption
                if self.user and self.password:
                    server.login(self.user, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise MailDeliveryError(str(e)) from e


def get_mail_transport(settings: Settings = Depends(get_settings)) -> SmtpMailTransport:
    """Dependency returning the configured transport; tests override it."""
    return SmtpMailTransport(settings)
