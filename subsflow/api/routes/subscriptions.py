"""Subscription Routes — the signed-in account's subscriptions plus admin ledger views."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from subsflow.api.dependencies import current_profile, get_platform, require_admin
from subsflow.core.domain_types import PlanId
from subsflow.core.entities import Profile
from subsflow.schemas.catalog import SubscribeRequest, SubscriptionResponse
from subsflow.services.platform import Platform

router = APIRouter(prefix="/api/v1/subscriptions", tags=["subscriptions"])


@router.get("", response_model=list[SubscriptionResponse])
async def my_subscriptions(
    platform: Platform = Depends(get_platform),
    profile: Profile = Depends(current_profile),
):
    subs = await platform.ledger.list_for(profile.id)
    return [SubscriptionResponse.from_entity(s) for s in subs]


@router.post(
    "", response_model=SubscriptionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def subscribe(
    body: SubscribeRequest,
    platform: Platform = Depends(get_platform),
    profile: Profile = Depends(current_profile),
):
    sub = await platform.ledger.subscribe(profile.id, PlanId(body.plan_id))
    return SubscriptionResponse.from_entity(sub)


@router.get("/all", response_model=list[SubscriptionResponse])
async def all_subscriptions(
    platform: Platform = Depends(get_platform),
    _admin: Profile = Depends(require_admin),
):
    return [
        SubscriptionResponse.from_entity(s)
        for s in await platform.ledger.list_all()
    ]


@router.post("/expire")
async def expire_lapsed(
    platform: Platform = Depends(get_platform),
    _admin: Profile = Depends(require_admin),
):
    """Run the expiry sweep now."""
    expired = await platform.ledger.expire_lapsed(datetime.now(timezone.utc))
    return {"expired": expired}
