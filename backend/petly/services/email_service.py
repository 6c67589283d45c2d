"""
Petly Backend: Email Service
==============================

What:  Sends the "contact this shelter" email on behalf of an adopter.
How:   smtplib over STARTTLS with login, run in a worker thread so the
       blocking SMTP conversation does not stall the event loop.
Who:   POST /api/shelters/{id}/contact.

The adopter's address goes in Reply-To so the shelter can answer directly;
the envelope sender is always EMAIL_SENDER.
"""

import asyncio
import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from petly.config import settings
from petly.exceptions import EmailDeliveryError, ValidationError

logger = logging.getLogger(__name__)


class EmailService:

    def build_contact_message(
        self,
        adopter_email: str,
        name: str,
        message: str,
        shelter_email: str,
        subject: str,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = settings.email_sender
        msg["To"] = shelter_email
        msg["Reply-To"] = adopter_email

        text_body = f"Hi, my name is {name}.\n\n{message}\n\nPlease contact me at {adopter_email}"
        html_body = (
            "<html><body>"
            f"<p>Hi, my name is {html.escape(name)}.</p>"
            f"<p>{html.escape(message)}</p>"
            f"<p>Please contact me at {html.escape(adopter_email)}</p>"
            "</body></html>"
        )
        msg.attach(MIMEText(text_body, "plain"))
        msg.attach(MIMEText(html_body, "html"))
        return msg

    def _deliver(self, msg: MIMEMultipart) -> None:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=30) as server:
            server.starttls()
            if settings.smtp_user:
                server.login(settings.smtp_user, settings.smtp_password)
            server.send_message(msg)

    async def send_contact_shelter(
        self,
        adopter_email: str,
        name: str,
        message: str,
        shelter_email: str,
        subject: str = "An adopter is interested in one of your dogs",
    ) -> None:
        """
        Raises:
            ValidationError:    `subject` spans more than one line
            EmailDeliveryError: SMTP is not configured or delivery failed
        """
        if "\r" in subject or "\n" in subject:
            raise ValidationError(message="subject must be a single line", field="subject")
        if not settings.smtp_configured:
            raise EmailDeliveryError(message="Email delivery is not configured")

        msg = self.build_contact_message(adopter_email, name, message, shelter_email, subject)
        try:
            await asyncio.to_thread(self._deliver, msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Contact email to %s failed: %s", shelter_email, str(e))
            raise EmailDeliveryError(context={"error_type": type(e).__name__})
        logger.info("Contact email sent to %s", shelter_email)


# ── Singleton Instance ────────────────────────────────────────────────────
# Stateless; reads SMTP settings at send time
email_service = EmailService()
