from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from passentry.core.core import Service
from passentry.core.modules.user.models import User
from passentry.core.modules.user.validators import validate_display_name, validate_email_address
from passentry.errors import NotFoundError, ValidationError
from passentry.utils import normalize_email

logger = structlog.get_logger(__name__)


class UserService(Service):
    """User directory backed by MongoDB with in-memory cache."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")
        self._users: dict[UUID, User] = {}

    async def find_by_email(self, email: str) -> User | None:
        """Find user by email address (case-insensitive)."""
        email = normalize_email(email)
        return next((u for u in self._users.values() if u.email == email), None)

    async def find_by_id(self, user_id: UUID) -> User | None:
        """Find user by ID."""
        return self._users.get(user_id)

    def get_user(self, user_id: UUID) -> User:
        """Get user by ID from cache."""
        if user_id not in self._users:
            raise NotFoundError(f"User '{user_id}' not found")
        return self._users[user_id]

    def has_user(self, user_id: UUID) -> bool:
        """Check if user exists by ID."""
        return user_id in self._users

    def has_email(self, email: str) -> bool:
        """Check if email is already registered."""
        email = normalize_email(email)
        return any(user.email == email for user in self._users.values())

    def get_all_users(self) -> list[User]:
        """Get all users from cache."""
        return list(self._users.values())

    async def create_user(self, email: str, display_name: str) -> User:
        """Register a user in the directory."""
        email = validate_email_address(email)
        display_name = validate_display_name(display_name)
        if self.has_email(email):
            raise ValidationError(f"User with email '{email}' already exists")

        res = await self._collection.insert_one(User(email=email, display_name=display_name).to_mongo())
        logger.info("user_created", user_id=res.inserted_id)
        return await self.update_user_cache(res.inserted_id)

    async def delete_user(self, user_id: UUID) -> None:
        """Remove a user from the directory."""
        if not self.has_user(user_id):
            raise NotFoundError(f"User '{user_id}' not found")

        await self._collection.delete_one({"_id": user_id})
        del self._users[user_id]
        logger.info("user_deleted", user_id=user_id)

    async def ensure_admin_user_exists(self) -> None:
        """Create the bootstrap user from config if not exists."""
        admin_email = self.core.config.admin_email
        if admin_email and not self.has_email(admin_email):
            await self.create_user(admin_email, self.core.config.admin_name)

    async def update_all_users_cache(self) -> None:
        """Reload all users cache from database."""
        users = await User.list_cursor(self._collection.find())
        self._users = {user.id: user for user in users}

    async def update_user_cache(self, user_id: UUID) -> User:
        """Reload a specific user cache from database."""
        user = User.from_mongo(await self._collection.find_one({"_id": user_id}))
        if user is None:
            raise NotFoundError(f"User '{user_id}' not found")
        self._users[user_id] = user
        return self._users[user_id]

    async def on_start(self) -> None:
        """Initialize indexes, cache, and bootstrap user."""
        await self._collection.create_index([("email", 1)], unique=True)
        await self.update_all_users_cache()
        await self.ensure_admin_user_exists()
        logger.debug("user_service_started", user_count=len(self._users))
