import asyncio

import pytest

from app.core.config import Settings
from app.errors import DeliveryError
from app.services.email import SmtpEmailSender, build_reset_url, render_password_reset_email


def test_build_reset_url_encodes_query():
    url = build_reset_url("http://localhost:3000/", "abc123", "a+b@example.com")
    assert url == "http://localhost:3000/reset-password?token=abc123&email=a%2Bb%40example.com"


def test_render_password_reset_email_escapes_user_data():
    subject, html = render_password_reset_email(
        app_name="Optical IMS",
        reset_url="http://localhost:3000/reset-password?token=t&email=e",
        user_name="<script>alert(1)</script>",
        user_email="sales@example.com",
        user_role="Sale",
        expire_minutes=15,
    )
    assert subject == "Password Reset Request - Optical IMS"
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert 'href="http://localhost:3000/reset-password?token=t&amp;email=e"' in html
    assert "15 minutes" in html


def test_smtp_sender_without_configuration_fails(settings: Settings):
    unconfigured = settings.model_copy(update={"smtp_host": None})
    sender = SmtpEmailSender(unconfigured)

    with pytest.raises(DeliveryError):
        asyncio.run(sender.send("admin@example.com", "Subject", "<p>Body</p>"))
