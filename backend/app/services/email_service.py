"""
Backend — Email Service
=========================

What:  Renders transactional emails from Jinja2 templates and delivers them
       over SMTP.
Who:   Login routes (password recovery), user routes (new account notice),
       utils routes (test email).
When:  Only when SMTP is configured (settings.emails_enabled).

Local development:
    SMTP_HOST=mailcatcher, SMTP_PORT=1025, SMTP_TLS=False. Every message is
    captured by the mail catcher and visible in its web UI (port 1080)
    instead of being delivered.

Delivery:
    aiosmtplib client per message: connect (implicit TLS when SMTP_SSL,
    STARTTLS when SMTP_TLS), optional login, send, quit. Any SMTP or socket
    failure surfaces as EmailDeliveryError (→ 503).
"""

import logging
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from pathlib import Path
from typing import Any, Dict

import aiosmtplib
from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from app.config import settings
from app.exceptions import EmailDeliveryError
from app.security import generate_password_reset_token

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "email_templates"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html", "xml"]),
    undefined=StrictUndefined,  # a missing variable is a bug, not a blank
    trim_blocks=True,
    lstrip_blocks=True,
)


@dataclass
class EmailData:
    html_content: str
    subject: str


def render_email_template(*, template_name: str, context: Dict[str, Any]) -> str:
    return _env.get_template(template_name).render(**context)


def generate_test_email(email_to: str) -> EmailData:
    project_name = settings.project_name
    subject = f"{project_name} - Test email"
    html_content = render_email_template(
        template_name="test_email.html",
        context={"project_name": project_name, "email": email_to},
    )
    return EmailData(html_content=html_content, subject=subject)


def generate_reset_password_email(email_to: str, email: str, token: str) -> EmailData:
    """
    Build the password recovery message.

    The link points at the frontend's reset page; the frontend posts the
    token back to /login/reset-password/.
    """
    project_name = settings.project_name
    subject = f"{project_name} - Password recovery for user {email}"
    link = f"{settings.frontend_host.rstrip('/')}/reset-password?token={token}"
    html_content = render_email_template(
        template_name="reset_password.html",
        context={
            "project_name": project_name,
            "username": email,
            "email": email_to,
            "valid_hours": settings.email_reset_token_expire_hours,
            "link": link,
        },
    )
    return EmailData(html_content=html_content, subject=subject)


def generate_new_account_email(email_to: str, username: str) -> EmailData:
    # The password is deliberately not included in the email body
    project_name = settings.project_name
    subject = f"{project_name} - New account for user {username}"
    html_content = render_email_template(
        template_name="new_account.html",
        context={
            "project_name": project_name,
            "username": username,
            "email": email_to,
            "link": settings.frontend_host,
        },
    )
    return EmailData(html_content=html_content, subject=subject)


def build_reset_password_email(email: str) -> EmailData:
    """Issue a fresh reset token for `email` and render the recovery message."""
    token = generate_password_reset_token(email=email)
    return generate_reset_password_email(email_to=email, email=email, token=token)


def _build_message(email_to: str, subject: str, html_content: str) -> EmailMessage:
    message = EmailMessage()
    message["Subject"] = subject
    message["From"] = formataddr((settings.emails_from_name or "", settings.emails_from_email or ""))
    message["To"] = email_to
    message["Message-ID"] = make_msgid()
    message.set_content("This message requires an HTML-capable email client.")
    message.add_alternative(html_content, subtype="html")
    return message


async def send_email(*, email_to: str, subject: str = "", html_content: str = "") -> None:
    """
    Deliver one HTML email.

    Raises:
        EmailDeliveryError: SMTP not configured, or the server refused/was unreachable.
    """
    if not settings.emails_enabled:
        raise EmailDeliveryError(
            message="Email sending is not configured on this server",
            context={"smtp_host": settings.smtp_host},
        )

    message = _build_message(email_to, subject, html_content)
    smtp = aiosmtplib.SMTP(
        hostname=settings.smtp_host,
        port=settings.smtp_port,
        timeout=settings.smtp_timeout,
        use_tls=settings.smtp_ssl,
        start_tls=settings.smtp_tls and not settings.smtp_ssl,
    )
    try:
        await smtp.connect()
        if settings.smtp_user and settings.smtp_password:
            await smtp.login(settings.smtp_user, settings.smtp_password)
        await smtp.send_message(message)
        await smtp.quit()
    except (aiosmtplib.SMTPException, OSError) as e:
        logger.error(
            "Failed to send email to %s via %s:%s: %s",
            email_to,
            settings.smtp_host,
            settings.smtp_port,
            str(e),
        )
        raise EmailDeliveryError(
            context={"error_type": type(e).__name__},
        ) from e
    finally:
        # quit() already closed it on success; this covers failures after connect()
        if smtp.is_connected:
            smtp.close()

    logger.info("Email sent to %s: %s", email_to, subject)
