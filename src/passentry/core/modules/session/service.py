import secrets
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from passentry.core.core import Service
from passentry.core.modules.session.models import AuthToken, Session
from passentry.core.modules.user.models import User
from passentry.errors import AuthenticationError

logger = structlog.get_logger(__name__)


class SessionService(Service):
    """Service for managing user sessions."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("sessions")
        self._authenticated_users: dict[AuthToken, User] = {}

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("auth_token", 1)], unique=True)
        await self._collection.create_index([("user_id", 1)])
        # TTL index for automatic session cleanup
        ttl_seconds = self.core.config.session_ttl_days * 24 * 60 * 60
        await self._collection.create_index([("created_at", 1)], expireAfterSeconds=ttl_seconds)

    async def start_session(self, user_id: UUID) -> AuthToken:
        """Mark the user as authenticated and return the session token."""
        auth_token = AuthToken(secrets.token_urlsafe(32))
        await self._collection.insert_one(Session(user_id=user_id, auth_token=auth_token).to_mongo())
        logger.info("session_started", user_id=user_id)
        return auth_token

    async def get_authenticated_user(self, auth_token: AuthToken) -> User:
        if auth_token in self._authenticated_users:
            return self._authenticated_users[auth_token]

        session = await self._collection.find_one({"auth_token": auth_token})
        if session is None:
            raise AuthenticationError("Invalid or expired session")

        if not self.core.services.user.has_user(session["user_id"]):
            raise AuthenticationError("Invalid or expired session")

        user = self.core.services.user.get_user(session["user_id"])
        self._authenticated_users[auth_token] = user
        return user

    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        try:
            await self.get_authenticated_user(auth_token)
        except AuthenticationError:
            return False
        return True

    async def invalidate_session(self, auth_token: AuthToken) -> None:
        """Invalidate a session by removing it from the database."""
        self._authenticated_users.pop(auth_token, None)
        await self._collection.delete_one({"auth_token": auth_token})

    async def invalidate_user_sessions(self, user_id: UUID) -> int:
        """Drop every session of a user, e.g. when the user is deleted."""
        self._authenticated_users = {t: u for t, u in self._authenticated_users.items() if u.id != user_id}
        result = await self._collection.delete_many({"user_id": user_id})
        return result.deleted_count
