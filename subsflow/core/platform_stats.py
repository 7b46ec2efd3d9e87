"""Platform Stats — pure computation of the admin dashboard aggregates.

Invariants:
    - active_subscriptions counts every subscription in the ledger
    - recurring_revenue sums the per-subscription price snapshot, never the live plan price
    - Never raises — an empty ledger yields zeros

Design Decisions:
    - Pure function over a list of subscriptions: no IO, trivially testable
"""

from decimal import Decimal

from subsflow.core.entities import PlatformStats, Subscription


def recurring_revenue(subscriptions: list[Subscription]) -> Decimal:
    return sum((s.price for s in subscriptions), Decimal("0"))


def compute_platform_stats(
    total_users: int, subscriptions: list[Subscription],
) -> PlatformStats:
    """Compute dashboard stats. Pure, no IO."""
    return PlatformStats(
        total_users=total_users,
        active_subscriptions=len(subscriptions),
        recurring_revenue=recurring_revenue(subscriptions),
    )
