"""Plan Catalog — create, update, delete and activate subscription plans.

Invariants:
    - Every write goes through normalize_plan_draft (core/enforce_plan.py)
    - Catalog order is creation order; update() keeps a plan's position
    - delete() removes the plan only; subscriptions keep their snapshot
    - Unknown plan ids raise ResourceNotFoundError
    - Writes are serialized by an asyncio.Lock
"""

import asyncio
import logging
import uuid

from subsflow.core.domain_types import PlanId
from subsflow.core.entities import Plan, PlanDraft
from subsflow.core.enforce_plan import normalize_plan_draft
from subsflow.core.errors import ResourceNotFoundError
from subsflow.core.repository_protocols import PlanRepository
from subsflow.services.latency import simulate_latency

logger = logging.getLogger(__name__)


def new_plan_id() -> PlanId:
    return PlanId(f"plan_{uuid.uuid4().hex}")


class PlanCatalog:

    def __init__(self, plans: PlanRepository, latency_ms: int = 0):
        self.plans = plans
        self.latency_ms = latency_ms
        self._lock = asyncio.Lock()

    async def list_plans(self, active_only: bool = False) -> list[Plan]:
        plans = await self.plans.list_all()
        if active_only:
            return [p for p in plans if p.is_active]
        return plans

    async def get_plan(self, plan_id: PlanId) -> Plan:
        plan = await self.plans.get(plan_id)
        if plan is None:
            raise ResourceNotFoundError("Plan", plan_id)
        return plan

    async def create_plan(
        self, draft: PlanDraft, plan_id: PlanId | None = None,
    ) -> Plan:
        clean = normalize_plan_draft(draft)
        await simulate_latency(self.latency_ms)
        plan = Plan(
            id=plan_id or new_plan_id(),
            name=clean.name,
            description=clean.description,
            price=clean.price,
            duration_days=clean.duration_days,
            features=clean.features,
            is_active=clean.is_active,
        )
        async with self._lock:
            await self.plans.add(plan)
        logger.info("Plan created", extra={"plan_id": plan.id})
        return plan

    async def update_plan(self, plan_id: PlanId, draft: PlanDraft) -> Plan:
        clean = normalize_plan_draft(draft)
        await simulate_latency(self.latency_ms)
        async with self._lock:
            existing = await self.get_plan(plan_id)
            plan = Plan(
                id=existing.id,
                name=clean.name,
                description=clean.description,
                price=clean.price,
                duration_days=clean.duration_days,
                features=clean.features,
                is_active=clean.is_active,
            )
            await self.plans.replace(plan)
        logger.info("Plan updated", extra={"plan_id": plan_id})
        return plan

    async def delete_plan(self, plan_id: PlanId) -> None:
        await simulate_latency(self.latency_ms)
        async with self._lock:
            await self.get_plan(plan_id)
            await self.plans.remove(plan_id)
        logger.info("Plan deleted", extra={"plan_id": plan_id})

    async def set_active(self, plan_id: PlanId, is_active: bool) -> Plan:
        await simulate_latency(self.latency_ms)
        async with self._lock:
            plan = (await self.get_plan(plan_id)).with_active(is_active)
            await self.plans.replace(plan)
        logger.info(
            f"Plan {'activated' if is_active else 'deactivated'}",
            extra={"plan_id": plan_id},
        )
        return plan

    async def toggle_active(self, plan_id: PlanId) -> Plan:
        await simulate_latency(self.latency_ms)
        async with self._lock:
            current = await self.get_plan(plan_id)
            plan = current.with_active(not current.is_active)
            await self.plans.replace(plan)
        logger.info(
            f"Plan {'activated' if plan.is_active else 'deactivated'}",
            extra={"plan_id": plan_id},
        )
        return plan
