"""Tests for compute_platform_stats — pure aggregates, no IO."""

from datetime import datetime, timezone
from decimal import Decimal

from subsflow.core.domain_types import (
    AccountId, PlanId, SubscriptionId, SubscriptionStatus,
)
from subsflow.core.entities import Subscription
from subsflow.core.platform_stats import compute_platform_stats, recurring_revenue


def _sub(sub_id: str, price: str, status=SubscriptionStatus.ACTIVE) -> Subscription:
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return Subscription(
        id=SubscriptionId(sub_id), account_id=AccountId("user1"),
        plan_id=PlanId("1"), plan_name="Basic Plan", price=Decimal(price),
        duration_days=30, status=status, start_date=now, end_date=now,
    )


def test_empty_ledger_returns_zero_stats():
    stats = compute_platform_stats(0, [])
    assert stats.total_users == 0
    assert stats.active_subscriptions == 0
    assert stats.recurring_revenue == Decimal("0")


def test_revenue_sums_snapshot_prices_exactly():
    subs = [_sub("1", "9.99"), _sub("2", "29.99"), _sub("3", "29.99")]
    assert recurring_revenue(subs) == Decimal("69.97")


def test_active_count_includes_every_subscription():
    subs = [
        _sub("1", "9.99"),
        _sub("2", "29.99", SubscriptionStatus.EXPIRED),
        _sub("3", "99.99", SubscriptionStatus.CANCELLED),
    ]
    stats = compute_platform_stats(5, subs)
    assert stats.total_users == 5
    assert stats.active_subscriptions == 3
    assert stats.recurring_revenue == Decimal("139.97")
