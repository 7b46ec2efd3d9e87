"""Boundary Protocols — contracts between the services and their storage.

Invariants:
    - Services NEVER import a concrete store — dependency arrows point inward only
    - All IO goes through these Protocol types
    - Implementations (in-memory, SQLAlchemy) are injected at composition time

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: a networked store can replace the in-memory one
      without touching service logic
    - DocumentStore is a string-valued key/value slot store: it holds the
      durable session record and the notification array
"""

from typing import Protocol

from subsflow.core.domain_types import AccountId, PlanId, SubscriptionId
from subsflow.core.entities import Account, Plan, Subscription


class DocumentStore(Protocol):
    """Durable key → JSON text slots. Last writer wins."""
    async def get(self, key: str) -> str | None: ...
    async def put(self, key: str, value: str) -> None: ...
    async def delete(self, key: str) -> None: ...


class AccountRepository(Protocol):
    """Contract for account persistence, keyed by email."""
    async def get_by_email(self, email: str) -> Account | None: ...
    async def get_by_id(self, account_id: AccountId) -> Account | None: ...
    async def add(self, account: Account) -> None: ...
    async def count(self) -> int: ...


class PlanRepository(Protocol):
    """Contract for the ordered plan catalog."""
    async def list_all(self) -> list[Plan]: ...
    async def get(self, plan_id: PlanId) -> Plan | None: ...
    async def add(self, plan: Plan) -> None: ...
    async def replace(self, plan: Plan) -> None: ...
    async def remove(self, plan_id: PlanId) -> None: ...


class SubscriptionRepository(Protocol):
    """Contract for the subscription ledger."""
    async def list_all(self) -> list[Subscription]: ...
    async def list_for(self, account_id: AccountId) -> list[Subscription]: ...
    async def get(self, subscription_id: SubscriptionId) -> Subscription | None: ...
    async def add(self, subscription: Subscription) -> None: ...
    async def replace(self, subscription: Subscription) -> None: ...
