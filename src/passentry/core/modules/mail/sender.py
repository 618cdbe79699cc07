"""Outbound email transports."""

import asyncio
import smtplib
from email.message import EmailMessage

import structlog

from passentry.config import SmtpSettings
from passentry.errors import DeliveryError

logger = structlog.get_logger(__name__)


class SmtpMailSender:
    """Sends HTML email over SMTP. Blocking I/O runs in a worker thread."""

    def __init__(self, settings: SmtpSettings) -> None:
        self._settings = settings

    async def send(self, to_email: str, subject: str, body: str) -> None:
        """Send one message.

        Raises:
            DeliveryError: If the SMTP exchange fails
        """
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self._settings.from_email
        message["To"] = to_email
        message.set_content("This message requires an HTML capable email client.")
        message.add_alternative(body, subtype="html")

        try:
            await asyncio.to_thread(self._send_blocking, message)
        except (smtplib.SMTPException, OSError) as e:
            raise DeliveryError(f"SMTP delivery to {to_email} failed: {e}") from e
        logger.debug("smtp_message_sent", to_email=to_email, host=self._settings.host)

    def _send_blocking(self, message: EmailMessage) -> None:
        s = self._settings
        with smtplib.SMTP(s.host, s.port, timeout=s.timeout) as server:
            if s.use_starttls:
                server.starttls()
            if s.username and s.password:
                server.login(s.username, s.password)
            server.send_message(message)


class LogMailSender:
    """Development transport: logs the message instead of sending it."""

    async def send(self, to_email: str, subject: str, body: str) -> None:
        logger.warning("smtp_not_configured_email_logged", to_email=to_email, subject=subject, body=body)
