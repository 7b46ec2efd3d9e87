"""In-Memory Stores — dict-backed implementations of the repository protocols.

Invariants:
    - Each store owns its own dicts (no module-level shared state)
    - Insertion order is preserved (dicts are ordered), so plans keep catalog order
    - Values are immutable dataclasses; replace() swaps the whole entity

Design Decisions:
    - Used by tests and by the no-database demo platform
    - Methods are async to satisfy the same Protocols as the SQL stores
"""

from subsflow.core.domain_types import AccountId, PlanId, SubscriptionId
from subsflow.core.entities import Account, Plan, Subscription


class InMemoryDocumentStore:
    """Key → text slots, the in-process stand-in for browser local storage."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._slots: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._slots.get(key)

    async def put(self, key: str, value: str) -> None:
        self._slots[key] = value

    async def delete(self, key: str) -> None:
        self._slots.pop(key, None)


class InMemoryAccountRepository:

    def __init__(self):
        self._by_email: dict[str, Account] = {}

    async def get_by_email(self, email: str) -> Account | None:
        return self._by_email.get(email)

    async def get_by_id(self, account_id: AccountId) -> Account | None:
        for account in self._by_email.values():
            if account.id == account_id:
                return account
        return None

    async def add(self, account: Account) -> None:
        self._by_email[account.email] = account

    async def count(self) -> int:
        return len(self._by_email)


class InMemoryPlanRepository:

    def __init__(self):
        self._plans: dict[PlanId, Plan] = {}

    async def list_all(self) -> list[Plan]:
        return list(self._plans.values())

    async def get(self, plan_id: PlanId) -> Plan | None:
        return self._plans.get(plan_id)

    async def add(self, plan: Plan) -> None:
        self._plans[plan.id] = plan

    async def replace(self, plan: Plan) -> None:
        # Same key keeps the original position in the dict
        self._plans[plan.id] = plan

    async def remove(self, plan_id: PlanId) -> None:
        self._plans.pop(plan_id, None)


class InMemorySubscriptionRepository:

    def __init__(self):
        self._subscriptions: dict[SubscriptionId, Subscription] = {}

    async def list_all(self) -> list[Subscription]:
        return list(self._subscriptions.values())

    async def list_for(self, account_id: AccountId) -> list[Subscription]:
        return [
            s for s in self._subscriptions.values()
            if s.account_id == account_id
        ]

    async def get(self, subscription_id: SubscriptionId) -> Subscription | None:
        return self._subscriptions.get(subscription_id)

    async def add(self, subscription: Subscription) -> None:
        self._subscriptions[subscription.id] = subscription

    async def replace(self, subscription: Subscription) -> None:
        self._subscriptions[subscription.id] = subscription
