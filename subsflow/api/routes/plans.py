"""Plan Routes — public catalog reads, admin-only writes.

Invariants:
    - Reads need no session; every write requires the admin role
    - Deleting a plan returns 204 and never touches subscriptions
"""

from fastapi import APIRouter, Depends, Query, status

from subsflow.api.dependencies import get_platform, require_admin
from subsflow.core.domain_types import PlanId
from subsflow.core.entities import Profile
from subsflow.schemas.catalog import PlanActiveUpdate, PlanResponse, PlanWrite
from subsflow.services.platform import Platform

router = APIRouter(prefix="/api/v1/plans", tags=["plans"])


@router.get("", response_model=list[PlanResponse])
async def list_plans(
    active_only: bool = Query(False),
    platform: Platform = Depends(get_platform),
):
    plans = await platform.catalog.list_plans(active_only=active_only)
    return [PlanResponse.from_entity(p) for p in plans]


@router.get("/{plan_id}", response_model=PlanResponse)
async def get_plan(plan_id: str, platform: Platform = Depends(get_platform)):
    return PlanResponse.from_entity(await platform.catalog.get_plan(PlanId(plan_id)))


@router.post(
    "", response_model=PlanResponse, status_code=status.HTTP_201_CREATED,
)
async def create_plan(
    body: PlanWrite,
    platform: Platform = Depends(get_platform),
    _admin: Profile = Depends(require_admin),
):
    plan = await platform.catalog.create_plan(body.to_draft())
    return PlanResponse.from_entity(plan)


@router.put("/{plan_id}", response_model=PlanResponse)
async def update_plan(
    plan_id: str,
    body: PlanWrite,
    platform: Platform = Depends(get_platform),
    _admin: Profile = Depends(require_admin),
):
    plan = await platform.catalog.update_plan(PlanId(plan_id), body.to_draft())
    return PlanResponse.from_entity(plan)


@router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_plan(
    plan_id: str,
    platform: Platform = Depends(get_platform),
    _admin: Profile = Depends(require_admin),
):
    await platform.catalog.delete_plan(PlanId(plan_id))


@router.put("/{plan_id}/active", response_model=PlanResponse)
async def set_plan_active(
    plan_id: str,
    body: PlanActiveUpdate,
    platform: Platform = Depends(get_platform),
    _admin: Profile = Depends(require_admin),
):
    plan = await platform.catalog.set_active(PlanId(plan_id), body.is_active)
    return PlanResponse.from_entity(plan)


@router.post("/{plan_id}/toggle", response_model=PlanResponse)
async def toggle_plan(
    plan_id: str,
    platform: Platform = Depends(get_platform),
    _admin: Profile = Depends(require_admin),
):
    plan = await platform.catalog.toggle_active(PlanId(plan_id))
    return PlanResponse.from_entity(plan)
