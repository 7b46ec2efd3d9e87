"""Entities — profile projection and the persisted notification layout."""

from datetime import datetime, timezone

import pytest

from subsflow.core.domain_types import (
    AccountId, AuthStatus, NotificationId, NotificationKind, Role,
)
from subsflow.core.entities import Account, CurrentIdentity, Notification


def test_profile_never_carries_the_credential():
    account = Account(
        id=AccountId("admin1"), email="admin@example.com",
        credential="admin123", full_name="Admin User", role=Role.ADMIN,
    )
    profile = account.profile
    assert profile.id == "admin1"
    assert profile.role == Role.ADMIN
    assert not hasattr(profile, "credential")


def test_loading_identity_is_not_authenticated():
    assert not CurrentIdentity(status=AuthStatus.LOADING).is_authenticated
    assert not CurrentIdentity(status=AuthStatus.ANONYMOUS).is_authenticated


def test_notification_record_uses_persisted_field_names():
    created = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)
    notification = Notification(
        id=NotificationId("n1"), account_id=AccountId("user1"),
        title="Welcome!", message="Hi", kind=NotificationKind.SUCCESS,
        is_read=False, created_at=created,
    )
    record = notification.to_record()
    assert record == {
        "id": "n1", "user_id": "user1", "title": "Welcome!", "message": "Hi",
        "type": "success", "is_read": False,
        "created_at": "2024-01-01T10:00:00+00:00",
    }
    assert Notification.from_record(record) == notification


def test_notification_from_record_accepts_z_suffix_timestamps():
    n = Notification.from_record({
        "id": "2", "user_id": "user123", "title": "Subscription Renewal",
        "message": "Your subscription will renew in 7 days.", "type": "info",
        "is_read": True, "created_at": "2024-01-15T14:30:00Z",
    })
    assert n.is_read is True
    assert n.created_at.tzinfo is not None


def test_notification_from_record_rejects_missing_fields():
    with pytest.raises(KeyError):
        Notification.from_record({"id": "1"})
