from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from passentry.core.db import MongoModel
from passentry.utils import now


class User(MongoModel):
    """User directory entry. Users authenticate only through emailed entry links."""

    email: str  # stored normalized (lowercase)
    display_name: str
    created_at: datetime = Field(default_factory=now)


class UserView(BaseModel):
    """User account information (API representation)."""

    id: UUID = Field(..., description="User ID")
    email: str = Field(..., description="Email address entry links are sent to")
    display_name: str = Field(..., description="Name used in greetings")

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(id=user.id, email=user.email, display_name=user.display_name)
