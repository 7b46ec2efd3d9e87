"""Demo Data — the accounts and plans a fresh installation starts with.

Invariants:
    - Seeding only touches empty stores (no duplicates across restarts)
    - Demo accounts keep fixed ids (admin1, user1) so stored sessions stay valid
"""

import logging
from decimal import Decimal

from subsflow.core.domain_types import AccountId, PlanId, Role
from subsflow.core.entities import PlanDraft
from subsflow.services.credential_store import CredentialStore
from subsflow.services.plan_catalog import PlanCatalog

logger = logging.getLogger(__name__)

DEMO_ACCOUNTS: tuple[dict, ...] = (
    {
        "account_id": AccountId("admin1"), "email": "admin@example.com",
        "credential": "admin123", "full_name": "Admin User", "role": Role.ADMIN,
    },
    {
        "account_id": AccountId("user1"), "email": "user@example.com",
        "credential": "user123", "full_name": "John Doe", "role": Role.USER,
    },
)

DEMO_PLANS: tuple[tuple[PlanId, PlanDraft], ...] = (
    (PlanId("1"), PlanDraft(
        name="Basic Plan",
        description="Perfect for getting started",
        price=Decimal("9.99"),
        duration_days=30,
        features=["Feature 1", "Feature 2", "Feature 3"],
    )),
    (PlanId("2"), PlanDraft(
        name="Pro Plan",
        description="For power users and businesses",
        price=Decimal("29.99"),
        duration_days=30,
        features=[
            "All Basic features", "Advanced Feature 1",
            "Advanced Feature 2", "Priority Support",
        ],
    )),
    (PlanId("3"), PlanDraft(
        name="Enterprise",
        description="Custom solutions for large teams",
        price=Decimal("99.99"),
        duration_days=30,
        features=[
            "All Pro features", "Custom Integration",
            "Dedicated Support", "SLA Guarantee",
        ],
    )),
)


async def seed_demo_data(credentials: CredentialStore, catalog: PlanCatalog) -> None:
    if await credentials.count() == 0:
        for account in DEMO_ACCOUNTS:
            await credentials.register(
                account["email"], account["credential"],
                account["full_name"], account["role"],
                account_id=account["account_id"],
            )
        logger.info(f"Seeded {len(DEMO_ACCOUNTS)} demo accounts")

    if not await catalog.list_plans():
        for plan_id, draft in DEMO_PLANS:
            await catalog.create_plan(draft, plan_id=plan_id)
        logger.info(f"Seeded {len(DEMO_PLANS)} demo plans")
