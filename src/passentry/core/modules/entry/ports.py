"""Collaborators the entry key engine talks to."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol
from uuid import UUID

from passentry.core.modules.session.models import AuthToken
from passentry.core.modules.user.models import User


class UserDirectory(Protocol):
    """Resolves users by email or id."""

    async def find_by_email(self, email: str) -> User | None:
        """Return the user registered with ``email``, if any."""

    async def find_by_id(self, user_id: UUID) -> User | None:
        """Return the user with ``user_id``, if any."""


class SessionEstablisher(Protocol):
    """Marks a user as authenticated for subsequent requests."""

    async def start_session(self, user_id: UUID) -> AuthToken:
        """Start a session and return the token identifying it."""


class MailSender(Protocol):
    """Outbound email transport."""

    async def send(self, to_email: str, subject: str, body: str) -> None:
        """Send a message, raising ``DeliveryError`` when the transport fails."""


class TemplateRenderer(Protocol):
    """Renders named templates."""

    def render(self, template_name: str, values: Mapping[str, Any] | None = None) -> str:
        """Render ``template_name`` with ``values`` substituted."""


__all__ = ["MailSender", "SessionEstablisher", "TemplateRenderer", "UserDirectory"]
