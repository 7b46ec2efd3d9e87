"""Notification Log — append-only per-account messages in one durable slot.

Invariants:
    - The slot holds a JSON array; append() extends it, never replaces earlier entries
    - An absent slot reads as an empty list; an unparseable one reads as empty too
      (and is overwritten by the next append)
    - mark_read() is idempotent; records are never duplicated or removed
    - list_for() is newest-first
    - Every read-modify-write runs under one asyncio.Lock
    - append() for an unknown account raises ResourceNotFoundError before writing

Design Decisions:
    - Individual malformed entries are skipped on read, not fatal
"""

import asyncio
import json
import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone

from subsflow.core.domain_types import (
    NOTIFICATIONS_KEY, AccountId, NotificationId, NotificationKind,
)
from subsflow.core.entities import Notification
from subsflow.core.errors import ResourceNotFoundError
from subsflow.core.repository_protocols import DocumentStore
from subsflow.services.credential_store import CredentialStore
from subsflow.services.latency import simulate_latency

logger = logging.getLogger(__name__)


class NotificationLog:

    def __init__(
        self,
        store: DocumentStore,
        credentials: CredentialStore,
        storage_key: str = NOTIFICATIONS_KEY,
        latency_ms: int = 0,
    ):
        self.store = store
        self.credentials = credentials
        self.storage_key = storage_key
        self.latency_ms = latency_ms
        self._lock = asyncio.Lock()

    async def append(
        self,
        account_id: AccountId,
        title: str,
        message: str,
        kind: NotificationKind = NotificationKind.INFO,
    ) -> Notification:
        if await self.credentials.lookup_id(account_id) is None:
            raise ResourceNotFoundError("Account", account_id)
        notification = Notification(
            id=NotificationId(f"notif_{uuid.uuid4().hex}"),
            account_id=account_id,
            title=title,
            message=message,
            kind=NotificationKind(kind),
            is_read=False,
            created_at=datetime.now(timezone.utc),
        )
        async with self._lock:
            records = await self._load()
            records.append(notification)
            await self._save(records)
        logger.info(
            "Notification appended",
            extra={"account_id": account_id, "notification_id": notification.id},
        )
        return notification

    async def list_for(self, account_id: AccountId) -> list[Notification]:
        records = await self._load()
        mine = [n for n in records if n.account_id == account_id]
        return list(reversed(mine))

    async def unread_count(self, account_id: AccountId) -> int:
        records = await self._load()
        return sum(1 for n in records if n.account_id == account_id and not n.is_read)

    async def mark_read(
        self, notification_id: NotificationId, account_id: AccountId | None = None,
    ) -> Notification:
        """Mark one notification read. Already-read is a no-op.

        When account_id is given, notifications owned by another account
        are reported as not found.
        """
        await simulate_latency(self.latency_ms)
        async with self._lock:
            records = await self._load()
            for index, notification in enumerate(records):
                if notification.id != notification_id:
                    continue
                if account_id is not None and notification.account_id != account_id:
                    break
                if notification.is_read:
                    return notification
                updated = replace(notification, is_read=True)
                records[index] = updated
                await self._save(records)
                return updated
        raise ResourceNotFoundError("Notification", notification_id)

    async def _load(self) -> list[Notification]:
        raw = await self.store.get(self.storage_key)
        if raw is None:
            return []
        try:
            payload = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Notification log unreadable, treating as empty: {e}")
            return []
        if not isinstance(payload, list):
            logger.warning("Notification log is not a list, treating as empty")
            return []

        notifications = []
        for record in payload:
            try:
                notifications.append(Notification.from_record(record))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping malformed notification record: {e}")
        return notifications

    async def _save(self, notifications: list[Notification]) -> None:
        await self.store.put(
            self.storage_key,
            json.dumps([n.to_record() for n in notifications], ensure_ascii=False),
        )
