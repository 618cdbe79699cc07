from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from uuid import UUID

from passentry.config import Config
from passentry.core.core import Core
from passentry.core.modules.session.models import AuthToken
from passentry.core.modules.user.models import UserView
from passentry.core.modules.user.validators import is_valid_email
from passentry.errors import AuthenticationError, ValidationError


class App:
    """Facade for all application operations, validates permissions before delegating to Core."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @property
    def config(self) -> Config:
        return self._core.config

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        """Check if authentication token is valid."""
        return await self._core.services.session.is_auth_token_valid(auth_token)

    async def request_entry(self, email: str) -> None:
        """Email an entry link if the address belongs to a user.

        Returns the same way whether or not the user exists.
        """
        if not is_valid_email(email):
            raise ValidationError("Invalid email address")
        await self._core.services.entry.request_entry(email)

    async def redeem_entry(self, key: str) -> AuthToken:
        """Exchange an entry key for a session."""
        auth_token = await self._core.services.entry.redeem(key)
        if auth_token is None:
            raise AuthenticationError("Invalid or expired entry link")
        return auth_token

    async def logout(self, auth_token: AuthToken) -> None:
        """Invalidate user session."""
        await self._core.services.session.get_authenticated_user(auth_token)
        await self._core.services.session.invalidate_session(auth_token)

    async def get_current_user(self, auth_token: AuthToken) -> UserView:
        """Get current authenticated user profile."""
        current_user = await self._core.services.session.get_authenticated_user(auth_token)
        return UserView.from_domain(current_user)

    async def get_all_users(self, auth_token: AuthToken) -> list[UserView]:
        """Get all users (requires authentication)."""
        await self._core.services.session.get_authenticated_user(auth_token)
        return [UserView.from_domain(user) for user in self._core.services.user.get_all_users()]

    async def create_user(self, auth_token: AuthToken, email: str, display_name: str) -> UserView:
        """Add a user to the directory (requires authentication)."""
        await self._core.services.session.get_authenticated_user(auth_token)
        user = await self._core.services.user.create_user(email, display_name)
        return UserView.from_domain(user)

    async def delete_user(self, auth_token: AuthToken, user_id: UUID) -> None:
        """Remove a user and their sessions (cannot delete self)."""
        current_user = await self._core.services.session.get_authenticated_user(auth_token)
        if current_user.id == user_id:
            raise ValidationError("Cannot delete yourself")
        await self._core.services.user.delete_user(user_id)
        await self._core.services.session.invalidate_user_sessions(user_id)

    def render_view(self, view: str) -> str:
        """Render one of the entry pages: request, requested or success."""
        return self._core.services.mail.render(view)
