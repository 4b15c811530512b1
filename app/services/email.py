import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from urllib.parse import urlencode

import aiosmtplib

from app.core.config import Settings
from app.errors import DeliveryError

logger = logging.getLogger(__name__)


class EmailSender:
    """Outbound email collaborator. Implementations raise DeliveryError on failure."""

    async def send(self, to_address: str, subject: str, html_body: str) -> None:
        raise NotImplementedError


class SmtpEmailSender(EmailSender):
    """Sends HTML email through an SMTP relay using aiosmtplib."""

    def __init__(self, settings: Settings):
        self._settings = settings

    async def send(self, to_address: str, subject: str, html_body: str) -> None:
        settings = self._settings
        if not settings.smtp_configured:
            logger.warning("SMTP not configured - cannot send email to %s", to_address)
            raise DeliveryError("SMTP is not configured")

        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = settings.smtp_from_email
        message["To"] = to_address
        message.attach(MIMEText(html_body, "html"))

        send_kwargs = {
            "hostname": settings.smtp_host,
            "port": settings.smtp_port,
            "username": settings.smtp_user,
            "password": settings.smtp_password,
        }

        # Handle TLS based on smtp_use_tls configuration
        if settings.smtp_use_tls:
            # Port 465 uses direct TLS, everything else STARTTLS
            if settings.smtp_port == 465:
                send_kwargs["use_tls"] = True
            else:
                send_kwargs["start_tls"] = True

        try:
            await aiosmtplib.send(message, **send_kwargs)
        except aiosmtplib.SMTPException as e:
            logger.error("SMTP delivery to %s failed: %s", to_address, e)
            raise DeliveryError("Failed to send email") from e
        except OSError as e:
            logger.error("SMTP connection for %s failed: %s", to_address, e)
            raise DeliveryError("Failed to send email") from e


def build_reset_url(frontend_url: str, token: str, email: str) -> str:
    query = urlencode({"token": token, "email": email})
    return f"{frontend_url.rstrip('/')}/reset-password?{query}"


def render_password_reset_email(
    *,
    app_name: str,
    reset_url: str,
    user_name: str,
    user_email: str,
    user_role: str,
    expire_minutes: int,
) -> tuple[str, str]:
    """
    Render the approval email sent to an administrator.

    Returns: (subject, html_body)
    """
    subject = f"Password Reset Request - {app_name}"
    link = escape(reset_url, quote=True)
    html = f"""
<html>
  <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h1>{escape(app_name)}</h1>
    <h2>Password Reset Request</h2>
    <p>A password reset has been requested for the following user:</p>
    <p><strong>Name:</strong> {escape(user_name)}</p>
    <p><strong>Email:</strong> {escape(user_email)}</p>
    <p><strong>Role:</strong> {escape(user_role)}</p>
    <p>As the administrator, you can reset this user's password with the link below:</p>
    <p><a href="{link}">Reset Password</a></p>
    <p>This link will expire in {expire_minutes} minutes. If this request was not expected, ignore this email.</p>
    <p>If the link does not work, copy this address into your browser:<br>{link}</p>
  </body>
</html>
"""
    return subject, html
