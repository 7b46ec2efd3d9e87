"""SQL Stores — SQLAlchemy-backed implementations of the repository protocols.

Invariants:
    - One short-lived AsyncSession per call (DatabaseSessionManager.session)
    - ORM rows never leak out: every method returns core entities
    - Datetimes read back without tzinfo (SQLite) are treated as UTC
    - Plan order is the insertion position, stable across replace()

Design Decisions:
    - Repositories hold the manager, not a session: services outlive requests
    - Email uniqueness is also enforced by the accounts.email UNIQUE index;
      a violation surfaces as StorageError via the session manager
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import select, delete, func

from subsflow.core.domain_types import (
    AccountId, PlanId, SubscriptionId, Role, SubscriptionStatus,
)
from subsflow.core.entities import Account, Plan, Subscription
from subsflow.infrastructure.database import DatabaseSessionManager
from subsflow.models.account import AccountRow
from subsflow.models.document import DocumentRow
from subsflow.models.plan import PlanRow
from subsflow.models.subscription import SubscriptionRow

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ─── Row ⇄ Entity ────────────────────────────────────────────────

def _account_from_row(row: AccountRow) -> Account:
    return Account(
        id=AccountId(row.id), email=row.email, credential=row.credential,
        full_name=row.full_name, role=Role(row.role),
    )


def _plan_from_row(row: PlanRow) -> Plan:
    return Plan(
        id=PlanId(row.id), name=row.name, description=row.description,
        price=Decimal(row.price), duration_days=row.duration_days,
        features=list(row.features or []), is_active=row.is_active,
    )


def _subscription_from_row(row: SubscriptionRow) -> Subscription:
    return Subscription(
        id=SubscriptionId(row.id),
        account_id=AccountId(row.account_id),
        plan_id=PlanId(row.plan_id),
        plan_name=row.plan_name,
        price=Decimal(row.price),
        duration_days=row.duration_days,
        status=SubscriptionStatus(row.status),
        start_date=_as_utc(row.start_date),
        end_date=_as_utc(row.end_date),
    )


# ─── Repositories ────────────────────────────────────────────────

class SqlDocumentStore:
    """Key → text slots persisted in the documents table."""

    def __init__(self, db: DatabaseSessionManager):
        self.db = db

    async def get(self, key: str) -> str | None:
        async with self.db.session() as session:
            row = await session.get(DocumentRow, key)
            return row.value if row else None

    async def put(self, key: str, value: str) -> None:
        async with self.db.session() as session:
            row = await session.get(DocumentRow, key)
            if row:
                row.value = value
            else:
                session.add(DocumentRow(key=key, value=value))
            await session.commit()

    async def delete(self, key: str) -> None:
        async with self.db.session() as session:
            await session.execute(
                delete(DocumentRow).where(DocumentRow.key == key),
            )
            await session.commit()


class SqlAccountRepository:

    def __init__(self, db: DatabaseSessionManager):
        self.db = db

    async def get_by_email(self, email: str) -> Account | None:
        async with self.db.session() as session:
            result = await session.execute(
                select(AccountRow).where(AccountRow.email == email),
            )
            row = result.scalar_one_or_none()
            return _account_from_row(row) if row else None

    async def get_by_id(self, account_id: AccountId) -> Account | None:
        async with self.db.session() as session:
            row = await session.get(AccountRow, account_id)
            return _account_from_row(row) if row else None

    async def add(self, account: Account) -> None:
        async with self.db.session() as session:
            session.add(AccountRow(
                id=account.id, email=account.email,
                credential=account.credential,
                full_name=account.full_name, role=account.role.value,
            ))
            await session.commit()

    async def count(self) -> int:
        async with self.db.session() as session:
            result = await session.execute(
                select(func.count()).select_from(AccountRow),
            )
            return int(result.scalar_one())


class SqlPlanRepository:

    def __init__(self, db: DatabaseSessionManager):
        self.db = db

    async def list_all(self) -> list[Plan]:
        async with self.db.session() as session:
            result = await session.execute(
                select(PlanRow).order_by(PlanRow.position, PlanRow.id),
            )
            return [_plan_from_row(r) for r in result.scalars().all()]

    async def get(self, plan_id: PlanId) -> Plan | None:
        async with self.db.session() as session:
            row = await session.get(PlanRow, plan_id)
            return _plan_from_row(row) if row else None

    async def add(self, plan: Plan) -> None:
        async with self.db.session() as session:
            result = await session.execute(select(func.max(PlanRow.position)))
            last = result.scalar_one_or_none()
            session.add(PlanRow(
                id=plan.id,
                position=(last + 1) if last is not None else 0,
                name=plan.name, description=plan.description,
                price=plan.price, duration_days=plan.duration_days,
                features=list(plan.features), is_active=plan.is_active,
            ))
            await session.commit()

    async def replace(self, plan: Plan) -> None:
        async with self.db.session() as session:
            row = await session.get(PlanRow, plan.id)
            if not row:
                logger.warning(
                    "Replace skipped for missing plan", extra={"plan_id": plan.id},
                )
                return
            row.name = plan.name
            row.description = plan.description
            row.price = plan.price
            row.duration_days = plan.duration_days
            row.features = list(plan.features)
            row.is_active = plan.is_active
            await session.commit()

    async def remove(self, plan_id: PlanId) -> None:
        async with self.db.session() as session:
            await session.execute(delete(PlanRow).where(PlanRow.id == plan_id))
            await session.commit()


class SqlSubscriptionRepository:

    def __init__(self, db: DatabaseSessionManager):
        self.db = db

    async def list_all(self) -> list[Subscription]:
        async with self.db.session() as session:
            result = await session.execute(
                select(SubscriptionRow).order_by(SubscriptionRow.start_date),
            )
            return [_subscription_from_row(r) for r in result.scalars().all()]

    async def list_for(self, account_id: AccountId) -> list[Subscription]:
        async with self.db.session() as session:
            result = await session.execute(
                select(SubscriptionRow)
                .where(SubscriptionRow.account_id == account_id)
                .order_by(SubscriptionRow.start_date),
            )
            return [_subscription_from_row(r) for r in result.scalars().all()]

    async def get(self, subscription_id: SubscriptionId) -> Subscription | None:
        async with self.db.session() as session:
            row = await session.get(SubscriptionRow, subscription_id)
            return _subscription_from_row(row) if row else None

    async def add(self, subscription: Subscription) -> None:
        async with self.db.session() as session:
            session.add(SubscriptionRow(
                id=subscription.id,
                account_id=subscription.account_id,
                plan_id=subscription.plan_id,
                plan_name=subscription.plan_name,
                price=subscription.price,
                duration_days=subscription.duration_days,
                status=subscription.status.value,
                start_date=subscription.start_date,
                end_date=subscription.end_date,
            ))
            await session.commit()

    async def replace(self, subscription: Subscription) -> None:
        async with self.db.session() as session:
            row = await session.get(SubscriptionRow, subscription.id)
            if not row:
                logger.warning(
                    "Replace skipped for missing subscription",
                    extra={"subscription_id": subscription.id},
                )
                return
            row.status = subscription.status.value
            row.end_date = subscription.end_date
            await session.commit()
