"""Stats Route — admin dashboard aggregates."""

from fastapi import APIRouter, Depends

from subsflow.api.dependencies import get_platform, require_admin
from subsflow.core.entities import Profile
from subsflow.schemas.catalog import StatsResponse
from subsflow.services.platform import Platform

router = APIRouter(prefix="/api/v1/stats", tags=["stats"])


@router.get("", response_model=StatsResponse)
async def platform_stats(
    platform: Platform = Depends(get_platform),
    _admin: Profile = Depends(require_admin),
):
    return StatsResponse.from_entity(await platform.stats())
