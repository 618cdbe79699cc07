from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from passentry.core.core import Service
from passentry.core.modules.entry.engine import EntryKeyEngine
from passentry.core.modules.entry.models import IssueResult
from passentry.core.modules.entry.storage import MongoCurrentKeyIndex, MongoEntryKeyStore
from passentry.core.modules.session.models import AuthToken

logger = structlog.get_logger(__name__)


class EntryService(Service):
    """Passwordless entry backed by MongoDB, wired to the user, session and mail services."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._store = MongoEntryKeyStore(database)
        self._index = MongoCurrentKeyIndex(database)
        self._engine: EntryKeyEngine | None = None

    async def on_start(self) -> None:
        await self._store.ensure_indexes()
        await self._index.ensure_indexes()
        services = self.core.services
        self._engine = EntryKeyEngine(
            store=self._store,
            index=self._index,
            users=services.user,
            sessions=services.session,
            mailer=services.mail,
            renderer=services.mail,
            settings=self.core.config.entry,
            entry_base_url=self.core.config.entry_base_url,
        )
        logger.debug("entry_service_started", enabled=self.core.config.entry.enabled)

    async def on_stop(self) -> None:
        if self._engine is not None:
            await self._engine.wait_for_deliveries()

    @property
    def engine(self) -> EntryKeyEngine:
        if self._engine is None:
            raise RuntimeError("Entry service not started")
        return self._engine

    async def request_entry(self, email: str) -> IssueResult:
        return await self.engine.issue(email)

    async def redeem(self, token: str) -> AuthToken | None:
        return await self.engine.redeem(token)
