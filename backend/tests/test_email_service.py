"""
Petly Backend: Email Service Tests
====================================

What:  Message construction and SMTP delivery for shelter contact emails.
How:   smtplib.SMTP is replaced with a MagicMock; nothing leaves the process.
"""

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from petly.config import settings
from petly.exceptions import EmailDeliveryError, ValidationError
from petly.services.email_service import EmailService


@pytest.fixture
def smtp_settings(monkeypatch):
    monkeypatch.setattr(settings, "smtp_host", "smtp.test")
    monkeypatch.setattr(settings, "smtp_user", "mailer")
    monkeypatch.setattr(settings, "smtp_password", "hunter2")
    monkeypatch.setattr(settings, "email_sender", "noreply@petly.test")


class TestContactMessage:

    def setup_method(self):
        self.service = EmailService()

    def test_headers(self, smtp_settings):
        msg = self.service.build_contact_message(
            "ann@example.com", "Ann", "Is Lucy available?", "hello@s1.example", "About Lucy"
        )
        assert msg["To"] == "hello@s1.example"
        assert msg["Reply-To"] == "ann@example.com"
        assert msg["From"] == "noreply@petly.test"
        assert msg["Subject"] == "About Lucy"

    def test_html_part_is_escaped(self):
        msg = self.service.build_contact_message(
            "ann@example.com", "<b>Ann</b>", "Hi & hello", "hello@s1.example", "Hi"
        )
        plain, rich = msg.get_payload()
        assert "<b>Ann</b>" in plain.get_payload(decode=True).decode()
        html_body = rich.get_payload(decode=True).decode()
        assert "&lt;b&gt;Ann&lt;/b&gt;" in html_body
        assert "Hi &amp; hello" in html_body


class TestDelivery:

    @pytest.mark.asyncio
    async def test_unconfigured_smtp(self, monkeypatch):
        monkeypatch.setattr(settings, "smtp_host", "")
        with pytest.raises(EmailDeliveryError, match="not configured"):
            await EmailService().send_contact_shelter(
                "ann@example.com", "Ann", "Hi", "hello@s1.example"
            )

    @pytest.mark.asyncio
    async def test_sends_with_starttls_and_login(self, smtp_settings):
        with patch("petly.services.email_service.smtplib.SMTP") as smtp_cls:
            server = smtp_cls.return_value.__enter__.return_value
            await EmailService().send_contact_shelter(
                "ann@example.com", "Ann", "Hi", "hello@s1.example"
            )

        smtp_cls.assert_called_once_with("smtp.test", settings.smtp_port, timeout=30)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("mailer", "hunter2")
        server.send_message.assert_called_once()

    @pytest.mark.asyncio
    async def test_smtp_failure(self, smtp_settings):
        with patch("petly.services.email_service.smtplib.SMTP") as smtp_cls:
            server = smtp_cls.return_value.__enter__.return_value
            server.send_message = MagicMock(side_effect=smtplib.SMTPRecipientsRefused({}))
            with pytest.raises(EmailDeliveryError):
                await EmailService().send_contact_shelter(
                    "ann@example.com", "Ann", "Hi", "hello@s1.example"
                )

    @pytest.mark.asyncio
    async def test_connection_refused(self, smtp_settings):
        with patch(
            "petly.services.email_service.smtplib.SMTP",
            side_effect=ConnectionRefusedError("refused"),
        ):
            with pytest.raises(EmailDeliveryError):
                await EmailService().send_contact_shelter(
                    "ann@example.com", "Ann", "Hi", "hello@s1.example"
                )

    @pytest.mark.asyncio
    async def test_multiline_subject_rejected(self, smtp_settings):
        with patch("petly.services.email_service.smtplib.SMTP") as smtp_cls:
            with pytest.raises(ValidationError):
                await EmailService().send_contact_shelter(
                    "ann@example.com", "Ann", "Hi", "hello@s1.example",
                    subject="Hi\r\nBcc: someone@example.com",
                )
        smtp_cls.assert_not_called()
