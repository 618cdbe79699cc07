"""Tests for the in-memory entry key store and current key index."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from passentry.core.modules.entry.models import EntryKey

pytestmark = pytest.mark.anyio

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


def make_record(token: str, expires_in: timedelta = timedelta(minutes=5)) -> EntryKey:
    return EntryKey(
        user_id=uuid4(),
        user_email="alice@example.com",
        token=token,
        expires_at=NOW + expires_in,
        entry_url=f"https://example.com/entry?ple_key={token}&ple=true",
        created_at=NOW,
    )


class TestInMemoryEntryKeyStore:
    async def test_put_and_get(self, store):
        record = make_record("t1")
        await store.put(record)
        assert await store.get("t1") == record

    async def test_get_missing_returns_none(self, store):
        assert await store.get("missing") is None

    async def test_put_overwrites_same_token(self, store):
        await store.put(make_record("t1"))
        replacement = make_record("t1")
        await store.put(replacement)
        assert await store.get("t1") == replacement
        assert len(store) == 1

    async def test_delete_is_idempotent(self, store):
        await store.put(make_record("t1"))
        await store.delete("t1")
        await store.delete("t1")
        assert await store.get("t1") is None

    async def test_take_returns_record_once(self, store):
        record = make_record("t1")
        await store.put(record)
        assert await store.take("t1") == record
        assert await store.take("t1") is None

    async def test_purge_expired_uses_inclusive_boundary(self, store):
        await store.put(make_record("expired", timedelta(minutes=-1)))
        await store.put(make_record("boundary", timedelta(0)))
        await store.put(make_record("fresh"))

        assert await store.purge_expired(NOW) == 2
        assert "fresh" in store
        assert len(store) == 1


class TestInMemoryCurrentKeyIndex:
    async def test_set_returns_previous(self, index):
        user_id = uuid4()
        assert await index.set_current(user_id, "t1") is None
        assert await index.set_current(user_id, "t2") == "t1"
        assert await index.get_current(user_id) == "t2"

    async def test_get_missing_returns_none(self, index):
        assert await index.get_current(uuid4()) is None

    async def test_clear_only_when_pointing_at_token(self, index):
        user_id = uuid4()
        await index.set_current(user_id, "t2")

        assert await index.clear_current(user_id, "t1") is False
        assert await index.get_current(user_id) == "t2"

        assert await index.clear_current(user_id, "t2") is True
        assert await index.get_current(user_id) is None

    async def test_users_are_independent(self, index):
        alice, bob = uuid4(), uuid4()
        await index.set_current(alice, "a")
        await index.set_current(bob, "b")
        assert await index.get_current(alice) == "a"
        assert await index.get_current(bob) == "b"
