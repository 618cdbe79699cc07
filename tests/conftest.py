"""Shared pytest fixtures."""

import asyncio
from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import pytest

from passentry.config import EntrySettings
from passentry.core.modules.entry.engine import EntryKeyEngine
from passentry.core.modules.entry.storage import InMemoryCurrentKeyIndex, InMemoryEntryKeyStore
from passentry.core.modules.session.models import AuthToken
from passentry.core.modules.user.models import User
from passentry.errors import DeliveryError
from passentry.utils import normalize_email

ENTRY_BASE_URL = "https://auth.example.com/entry"


class FakeClock:
    """Controllable replacement for utils.now."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


class FakeUserDirectory:
    def __init__(self, users: list[User]) -> None:
        self.users = {user.id: user for user in users}

    async def find_by_email(self, email: str) -> User | None:
        await asyncio.sleep(0)  # let concurrent callers interleave
        email = normalize_email(email)
        return next((u for u in self.users.values() if u.email == email), None)

    async def find_by_id(self, user_id: UUID) -> User | None:
        return self.users.get(user_id)


class FakeSessions:
    def __init__(self) -> None:
        self.started: list[UUID] = []

    async def start_session(self, user_id: UUID) -> AuthToken:
        self.started.append(user_id)
        return AuthToken(f"session-{len(self.started)}")


class RecordingMailer:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []

    async def send(self, to_email: str, subject: str, body: str) -> None:
        self.sent.append((to_email, subject, body))


class FailingMailer:
    def __init__(self) -> None:
        self.attempts = 0

    async def send(self, to_email: str, subject: str, body: str) -> None:
        self.attempts += 1
        raise DeliveryError("connection refused")


class StubRenderer:
    """Renders `name|key=value|...` so tests can assert on the values passed."""

    def render(self, template_name: str, values: Mapping[str, Any] | None = None) -> str:
        parts = [template_name] + [f"{key}={value}" for key, value in sorted((values or {}).items())]
        return "|".join(parts)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def mock_user():
    """Create a mock user for testing."""
    return User(
        id=UUID("87654321-4321-8765-4321-876543218765"),
        email="alice@example.com",
        display_name="Alice",
    )


@pytest.fixture
def other_user():
    return User(
        id=UUID("12345678-1234-5678-1234-567812345678"),
        email="bob@example.com",
        display_name="Bob",
    )


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 1, 15, 12, 0, tzinfo=UTC))


@pytest.fixture
def store():
    return InMemoryEntryKeyStore()


@pytest.fixture
def index():
    return InMemoryCurrentKeyIndex()


@pytest.fixture
def directory(mock_user, other_user):
    return FakeUserDirectory([mock_user, other_user])


@pytest.fixture
def sessions():
    return FakeSessions()


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def failing_mailer():
    return FailingMailer()


@pytest.fixture
def settings():
    return EntrySettings()


@pytest.fixture
def make_engine(store, index, directory, sessions, mailer, settings, clock):
    """Build an engine, optionally overriding any collaborator."""

    def factory(**overrides: Any) -> EntryKeyEngine:
        kwargs: dict[str, Any] = {
            "store": store,
            "index": index,
            "users": directory,
            "sessions": sessions,
            "mailer": mailer,
            "renderer": StubRenderer(),
            "settings": settings,
            "entry_base_url": ENTRY_BASE_URL,
            "clock": clock,
        }
        kwargs.update(overrides)
        return EntryKeyEngine(**kwargs)

    return factory


@pytest.fixture
def engine(make_engine):
    return make_engine()
