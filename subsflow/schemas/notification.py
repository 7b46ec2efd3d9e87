"""Notification Schemas — read-side view of the notification log."""

from datetime import datetime

from pydantic import BaseModel

from subsflow.core.entities import Notification


class NotificationResponse(BaseModel):
    id: str
    account_id: str
    title: str
    message: str
    kind: str
    is_read: bool
    created_at: datetime

    @classmethod
    def from_entity(cls, n: Notification) -> "NotificationResponse":
        return cls(
            id=n.id, account_id=n.account_id, title=n.title,
            message=n.message, kind=n.kind.value, is_read=n.is_read,
            created_at=n.created_at,
        )


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    unread_count: int
