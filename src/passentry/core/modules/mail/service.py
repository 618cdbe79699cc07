from collections.abc import Mapping
from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from passentry.core.core import Service
from passentry.core.modules.mail.rendering import LiquidTemplateRenderer
from passentry.core.modules.mail.sender import LogMailSender, SmtpMailSender

logger = structlog.get_logger(__name__)


class MailService(Service):
    """Template rendering and outbound email, configured from Config.smtp."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._renderer: LiquidTemplateRenderer | None = None
        self._sender: SmtpMailSender | LogMailSender | None = None

    async def on_start(self) -> None:
        config = self.core.config
        self._renderer = LiquidTemplateRenderer(
            {
                "site_name": config.site_name,
                "site_url": config.site_url,
                "email_key": config.entry.email_parameter,
            }
        )
        if config.smtp is None:
            self._sender = LogMailSender()
            logger.warning("mail_service_started_without_smtp")
        else:
            self._sender = SmtpMailSender(config.smtp)
            logger.debug("mail_service_started", host=config.smtp.host, port=config.smtp.port)

    def render(self, template_name: str, values: Mapping[str, Any] | None = None) -> str:
        """Render a page or email template."""
        if self._renderer is None:
            raise RuntimeError("Mail service not started")
        return self._renderer.render(template_name, values)

    async def send(self, to_email: str, subject: str, body: str) -> None:
        """Send an email. Raises DeliveryError on transport failure."""
        if self._sender is None:
            raise RuntimeError("Mail service not started")
        await self._sender.send(to_email, subject, body)
