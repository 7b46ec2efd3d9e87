"""Notification Routes — the signed-in account's notifications and read-state toggle.

Invariants:
    - Only the owner's notifications are listed or marked
    - POST /{id}/read is idempotent
"""

from fastapi import APIRouter, Depends

from subsflow.api.dependencies import current_profile, get_platform
from subsflow.core.domain_types import NotificationId
from subsflow.core.entities import Profile
from subsflow.schemas.notification import (
    NotificationListResponse, NotificationResponse,
)
from subsflow.services.platform import Platform

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    platform: Platform = Depends(get_platform),
    profile: Profile = Depends(current_profile),
):
    notifications = await platform.notifications.list_for(profile.id)
    return NotificationListResponse(
        notifications=[NotificationResponse.from_entity(n) for n in notifications],
        unread_count=sum(1 for n in notifications if not n.is_read),
    )


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: str,
    platform: Platform = Depends(get_platform),
    profile: Profile = Depends(current_profile),
):
    notification = await platform.notifications.mark_read(
        NotificationId(notification_id), account_id=profile.id,
    )
    return NotificationResponse.from_entity(notification)
