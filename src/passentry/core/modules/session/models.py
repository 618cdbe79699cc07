"""Session management models."""

from datetime import datetime
from typing import NewType
from uuid import UUID

from pydantic import Field

from passentry.core.db import MongoModel
from passentry.utils import now

AuthToken = NewType("AuthToken", str)


class Session(MongoModel):
    """Authenticated session started by redeeming an entry key.

    Indexed on auth_token - unique, user_id, created_at (TTL session_ttl_days).
    """

    user_id: UUID
    auth_token: str
    created_at: datetime = Field(default_factory=now)
