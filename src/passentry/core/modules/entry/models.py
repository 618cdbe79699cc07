"""Passwordless entry key models."""

from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field

from passentry.core.db import MongoModel
from passentry.utils import now


class EntryKey(MongoModel):
    """One issued passwordless entry grant. Immutable once stored.

    Indexed on token - unique, user_id, expires_at (TTL, removed once expired).
    """

    user_id: UUID
    user_email: str  # Address the link was sent to, not re-checked against the directory
    token: str
    expires_at: datetime
    entry_url: str
    created_at: datetime = Field(default_factory=now)

    def is_expired(self, at: datetime) -> bool:
        """The expiry instant itself already counts as expired."""
        return at >= self.expires_at


class CurrentEntryKey(BaseModel):
    """Pointer from a user to their most recently issued entry key."""

    user_id: UUID
    token: str


class IssueResult(StrEnum):
    """Outcome of an issuance request. Callers must not reveal the difference."""

    ISSUED = "issued"
    USER_NOT_FOUND = "user_not_found"


class KeyStatus(StrEnum):
    """Read-time classification of a presented entry key.

    Everything except VALID is reported to callers as a plain invalid key.
    """

    VALID = "valid"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    SUPERSEDED = "superseded"
