"""Entry key lifecycle: issue, verify and single-use redemption."""

import asyncio
from collections.abc import Callable
from datetime import datetime, timedelta

import structlog

from passentry.config import EntrySettings
from passentry.core.modules.entry.keys import build_entry_url, generate_entry_key
from passentry.core.modules.entry.models import EntryKey, IssueResult, KeyStatus
from passentry.core.modules.entry.ports import MailSender, SessionEstablisher, TemplateRenderer, UserDirectory
from passentry.core.modules.entry.storage import CurrentKeyIndex, EntryKeyStore
from passentry.core.modules.session.models import AuthToken
from passentry.errors import DeliveryError
from passentry.utils import now

logger = structlog.get_logger(__name__)


class EntryKeyEngine:
    """Issues, verifies and consumes passwordless entry keys.

    No exception leaves issue/verify/authenticate for expected outcomes:
    unknown users, bad keys and failed deliveries all come back as values.
    """

    def __init__(
        self,
        *,
        store: EntryKeyStore,
        index: CurrentKeyIndex,
        users: UserDirectory,
        sessions: SessionEstablisher,
        mailer: MailSender,
        renderer: TemplateRenderer,
        settings: EntrySettings,
        entry_base_url: str,
        clock: Callable[[], datetime] = now,
    ) -> None:
        self._store = store
        self._index = index
        self._users = users
        self._sessions = sessions
        self._mailer = mailer
        self._renderer = renderer
        self._settings = settings
        self._entry_base_url = entry_base_url
        self._clock = clock
        self._delivery_tasks: set[asyncio.Task[None]] = set()

    @property
    def settings(self) -> EntrySettings:
        return self._settings

    async def issue(self, email: str) -> IssueResult:
        """Issue a fresh entry key for the user owning ``email`` and email the link.

        Any earlier key of the same user stops working. The email goes out in the
        background; its failure does not undo the issuance.
        """
        user = await self._users.find_by_email(email)
        if user is None:
            logger.info("entry_key_user_not_found")
            return IssueResult.USER_NOT_FOUND

        token = generate_entry_key(self._settings.key_length)
        issued_at = self._clock()
        record = EntryKey(
            user_id=user.id,
            user_email=user.email,
            token=token,
            expires_at=issued_at + timedelta(minutes=self._settings.expiration_minutes),
            entry_url=build_entry_url(
                self._entry_base_url, token, self._settings.key_parameter, self._settings.controller_parameter
            ),
            created_at=issued_at,
        )

        await self._store.put(record)
        # The swap is atomic, so concurrent issuers each remove exactly the key they replaced
        previous = await self._index.set_current(user.id, token)
        if previous is not None and previous != token:
            await self._store.delete(previous)
            logger.debug("entry_key_superseded", user_id=user.id, key=previous)

        logger.info("entry_key_issued", user_id=user.id, key=token, expires_at=record.expires_at)
        self._schedule_delivery(record, user.display_name)
        return IssueResult.ISSUED

    async def inspect(self, token: str) -> KeyStatus:
        """Classify a presented key without changing anything."""
        if not token:
            return KeyStatus.NOT_FOUND

        record = await self._store.get(token)
        if record is None:
            return KeyStatus.NOT_FOUND
        if record.is_expired(self._clock()):
            return KeyStatus.EXPIRED
        if await self._index.get_current(record.user_id) != token:
            return KeyStatus.SUPERSEDED
        return KeyStatus.VALID

    async def verify(self, token: str) -> bool:
        """Return True if ``token`` may be redeemed right now. Read-only."""
        status = await self.inspect(token)
        if status is not KeyStatus.VALID:
            logger.info("entry_key_rejected", key=token, reason=status)
            return False
        return True

    async def authenticate(self, token: str) -> AuthToken | None:
        """Consume ``token`` and start a session for its owner.

        Must only be called right after ``verify(token)`` returned True on the same
        control path: expiry and supersession are not checked again here. Use
        ``redeem`` unless you need the two steps separately.

        Returns None when the key was already consumed (e.g. by a concurrent
        request) or its owner left the directory.
        """
        record = await self._store.take(token)
        if record is None:
            logger.info("entry_key_already_consumed", key=token)
            return None

        await self._index.clear_current(record.user_id, token)

        if await self._users.find_by_id(record.user_id) is None:
            logger.warning("entry_key_owner_missing", user_id=record.user_id)
            return None

        auth_token = await self._sessions.start_session(record.user_id)
        logger.info("entry_key_redeemed", user_id=record.user_id, key=token)
        return auth_token

    async def redeem(self, token: str) -> AuthToken | None:
        """Verify and authenticate in one step."""
        if not await self.verify(token):
            return None
        return await self.authenticate(token)

    async def purge_expired(self) -> int:
        """Remove keys that expired without being redeemed."""
        removed = await self._store.purge_expired(self._clock())
        if removed:
            logger.debug("entry_keys_purged", count=removed)
        return removed

    async def wait_for_deliveries(self) -> None:
        """Wait until every scheduled email has been handed to the transport or failed."""
        if self._delivery_tasks:
            await asyncio.gather(*self._delivery_tasks, return_exceptions=True)

    def _schedule_delivery(self, record: EntryKey, display_name: str) -> None:
        task = asyncio.create_task(self._deliver(record, display_name))
        self._delivery_tasks.add(task)
        task.add_done_callback(self._delivery_tasks.discard)

    async def _deliver(self, record: EntryKey, display_name: str) -> None:
        try:
            body = self._renderer.render(
                "email",
                {
                    "name": display_name,
                    "link": record.entry_url,
                    "minutes": self._settings.expiration_minutes,
                },
            )
            await self._mailer.send(record.user_email, self._settings.email_subject, body)
        except DeliveryError as e:
            logger.warning("entry_email_delivery_failed", user_id=record.user_id, error=str(e))
        except Exception as e:
            logger.exception("entry_email_error", user_id=record.user_id, error=str(e))
        else:
            logger.info("entry_email_sent", user_id=record.user_id)
