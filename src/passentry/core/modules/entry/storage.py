"""Storage for entry keys and the per-user current key pointer.

Every operation is atomic on its own; the engine never relies on two
operations happening together.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from passentry.core.modules.entry.models import CurrentEntryKey, EntryKey


class EntryKeyStore(Protocol):
    """Entry key records keyed by token value."""

    async def put(self, record: EntryKey) -> None:
        """Store ``record``, replacing any record with the same token."""

    async def get(self, token: str) -> EntryKey | None:
        """Return the record for ``token``; ``None`` when absent."""

    async def delete(self, token: str) -> None:
        """Remove the record for ``token``; no-op when absent."""

    async def take(self, token: str) -> EntryKey | None:
        """Remove and return the record; only one caller ever receives it."""

    async def purge_expired(self, at: datetime) -> int:
        """Remove records expired at ``at`` and return how many were removed."""


class CurrentKeyIndex(Protocol):
    """Maps each user to the token of their current entry key."""

    async def set_current(self, user_id: UUID, token: str) -> str | None:
        """Point ``user_id`` at ``token`` and return the token it replaced."""

    async def get_current(self, user_id: UUID) -> str | None:
        """Return the user's current token, if any."""

    async def clear_current(self, user_id: UUID, token: str) -> bool:
        """Drop the pointer only if it still points at ``token``."""


class MongoEntryKeyStore:
    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self._collection = database.get_collection("entry_keys")

    async def ensure_indexes(self) -> None:
        await self._collection.create_index([("token", 1)], unique=True)
        await self._collection.create_index([("user_id", 1)])
        # TTL index sweeps keys nobody redeemed
        await self._collection.create_index([("expires_at", 1)], expireAfterSeconds=0)

    async def put(self, record: EntryKey) -> None:
        await self._collection.replace_one({"token": record.token}, record.to_mongo(), upsert=True)

    async def get(self, token: str) -> EntryKey | None:
        return EntryKey.from_mongo(await self._collection.find_one({"token": token}))

    async def delete(self, token: str) -> None:
        await self._collection.delete_one({"token": token})

    async def take(self, token: str) -> EntryKey | None:
        return EntryKey.from_mongo(await self._collection.find_one_and_delete({"token": token}))

    async def purge_expired(self, at: datetime) -> int:
        result = await self._collection.delete_many({"expires_at": {"$lte": at}})
        return result.deleted_count


class MongoCurrentKeyIndex:
    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self._collection = database.get_collection("current_entry_keys")

    async def ensure_indexes(self) -> None:
        await self._collection.create_index([("user_id", 1)], unique=True)

    async def set_current(self, user_id: UUID, token: str) -> str | None:
        previous = await self._collection.find_one_and_update(
            {"user_id": user_id},
            {"$set": {"token": token}},
            upsert=True,
            return_document=ReturnDocument.BEFORE,
        )
        return CurrentEntryKey.model_validate(previous).token if previous else None

    async def get_current(self, user_id: UUID) -> str | None:
        doc = await self._collection.find_one({"user_id": user_id})
        return CurrentEntryKey.model_validate(doc).token if doc else None

    async def clear_current(self, user_id: UUID, token: str) -> bool:
        result = await self._collection.delete_one({"user_id": user_id, "token": token})
        return result.deleted_count == 1


class InMemoryEntryKeyStore:
    """Process-local store. No await happens inside an operation, so each is atomic on the event loop."""

    def __init__(self) -> None:
        self._records: dict[str, EntryKey] = {}

    async def put(self, record: EntryKey) -> None:
        self._records[record.token] = record

    async def get(self, token: str) -> EntryKey | None:
        return self._records.get(token)

    async def delete(self, token: str) -> None:
        self._records.pop(token, None)

    async def take(self, token: str) -> EntryKey | None:
        return self._records.pop(token, None)

    async def purge_expired(self, at: datetime) -> int:
        expired = [token for token, record in self._records.items() if record.is_expired(at)]
        for token in expired:
            del self._records[token]
        return len(expired)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, token: object) -> bool:
        return token in self._records


class InMemoryCurrentKeyIndex:
    def __init__(self) -> None:
        self._pointers: dict[UUID, str] = {}

    async def set_current(self, user_id: UUID, token: str) -> str | None:
        previous = self._pointers.get(user_id)
        self._pointers[user_id] = token
        return previous

    async def get_current(self, user_id: UUID) -> str | None:
        return self._pointers.get(user_id)

    async def clear_current(self, user_id: UUID, token: str) -> bool:
        if self._pointers.get(user_id) != token:
            return False
        del self._pointers[user_id]
        return True
