"""Subscription Ledger — per-account subscriptions and the aggregates derived from them.

Invariants:
    - subscribe() snapshots plan name, price and duration_days onto the subscription
    - New subscriptions start ACTIVE with end_date = start_date + duration_days
    - Unknown account or plan → ResourceNotFoundError; inactive plan → PlanInactiveError
    - Deleting or repricing a plan later never changes an existing subscription
    - active_subscription_count() counts every subscription in the ledger
    - recurring_revenue() sums snapshot prices (core/platform_stats.py)
    - Status only changes through explicit calls (expire_lapsed), never by itself

Design Decisions:
    - The catalog is read through PlanCatalog.get_plan, so not-found handling is shared
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from subsflow.core.domain_types import (
    AccountId, PlanId, SubscriptionId, SubscriptionStatus,
)
from subsflow.core.entities import Subscription
from subsflow.core.enforce_plan import subscription_window
from subsflow.core.errors import PlanInactiveError, ResourceNotFoundError
from subsflow.core.platform_stats import recurring_revenue
from subsflow.core.repository_protocols import SubscriptionRepository
from subsflow.services.credential_store import CredentialStore
from subsflow.services.latency import simulate_latency
from subsflow.services.plan_catalog import PlanCatalog

logger = logging.getLogger(__name__)


class SubscriptionLedger:

    def __init__(
        self,
        subscriptions: SubscriptionRepository,
        catalog: PlanCatalog,
        credentials: CredentialStore,
        latency_ms: int = 0,
    ):
        self.subscriptions = subscriptions
        self.catalog = catalog
        self.credentials = credentials
        self.latency_ms = latency_ms
        self._lock = asyncio.Lock()

    async def subscribe(
        self,
        account_id: AccountId,
        plan_id: PlanId,
        now: datetime | None = None,
    ) -> Subscription:
        await simulate_latency(self.latency_ms)
        async with self._lock:
            if await self.credentials.lookup_id(account_id) is None:
                raise ResourceNotFoundError("Account", account_id)
            plan = await self.catalog.get_plan(plan_id)
            if not plan.is_active:
                raise PlanInactiveError(plan_id)

            start, end = subscription_window(
                now or datetime.now(timezone.utc), plan.duration_days,
            )
            subscription = Subscription(
                id=SubscriptionId(f"sub_{uuid.uuid4().hex}"),
                account_id=account_id,
                plan_id=plan.id,
                plan_name=plan.name,
                price=plan.price,
                duration_days=plan.duration_days,
                status=SubscriptionStatus.ACTIVE,
                start_date=start,
                end_date=end,
            )
            await self.subscriptions.add(subscription)

        logger.info(
            "Subscription created",
            extra={
                "account_id": account_id, "plan_id": plan_id,
                "subscription_id": subscription.id,
            },
        )
        return subscription

    async def list_for(self, account_id: AccountId) -> list[Subscription]:
        return await self.subscriptions.list_for(account_id)

    async def list_all(self) -> list[Subscription]:
        return await self.subscriptions.list_all()

    async def active_subscription_count(self) -> int:
        return len(await self.subscriptions.list_all())

    async def recurring_revenue(self) -> Decimal:
        return recurring_revenue(await self.subscriptions.list_all())

    async def expire_lapsed(self, now: datetime | None = None) -> int:
        """Mark ACTIVE subscriptions whose end_date has passed as EXPIRED."""
        now = now or datetime.now(timezone.utc)
        expired = 0
        async with self._lock:
            for subscription in await self.subscriptions.list_all():
                if (
                    subscription.status == SubscriptionStatus.ACTIVE
                    and subscription.end_date < now
                ):
                    await self.subscriptions.replace(
                        subscription.with_status(SubscriptionStatus.EXPIRED),
                    )
                    expired += 1
        if expired:
            logger.info(f"Expired {expired} lapsed subscription(s)")
        return expired
