"""Entities — plain dataclasses for accounts, plans, subscriptions, notifications.

Invariants:
    - Account is the only entity carrying a credential; Profile never does
    - Subscription snapshots plan name, price and duration at creation time
    - Plan.price >= 0 and Plan.duration_days > 0 (enforced by the catalog, not here)
    - Notification.to_record() uses the persisted field names (user_id, type, is_read)

Design Decisions:
    - Dataclasses, not ORM rows: services and in-memory stores share them,
      SQL repositories convert at the boundary
    - Decimal for money: revenue sums must not drift
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal

from subsflow.core.domain_types import (
    AccountId, PlanId, SubscriptionId, NotificationId,
    Role, AuthStatus, SubscriptionStatus, NotificationKind,
)


@dataclass(frozen=True)
class Profile:
    """Public view of an account."""
    id: AccountId
    email: str
    full_name: str
    role: Role


@dataclass(frozen=True)
class Account:
    """Registered identity. Immutable once created."""
    id: AccountId
    email: str
    credential: str
    full_name: str
    role: Role

    @property
    def profile(self) -> Profile:
        return Profile(
            id=self.id, email=self.email,
            full_name=self.full_name, role=self.role,
        )


@dataclass(frozen=True)
class Session:
    """Binding of the current operator to one account."""
    account_id: AccountId
    email: str


@dataclass(frozen=True)
class CurrentIdentity:
    """What the rest of the system sees as 'who is signed in'."""
    status: AuthStatus
    session: Session | None = None
    profile: Profile | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.status == AuthStatus.AUTHENTICATED and self.profile is not None


@dataclass(frozen=True)
class PlanDraft:
    """Admin-supplied plan fields before validation."""
    name: str
    description: str = ""
    price: Decimal = Decimal("0")
    duration_days: int = 30
    features: list[str] = field(default_factory=list)
    is_active: bool = True


@dataclass(frozen=True)
class Plan:
    id: PlanId
    name: str
    description: str
    price: Decimal
    duration_days: int
    features: list[str]
    is_active: bool = True

    def with_active(self, is_active: bool) -> "Plan":
        return replace(self, is_active=is_active)


@dataclass(frozen=True)
class Subscription:
    id: SubscriptionId
    account_id: AccountId
    plan_id: PlanId
    plan_name: str
    price: Decimal
    duration_days: int
    status: SubscriptionStatus
    start_date: datetime
    end_date: datetime

    def with_status(self, status: SubscriptionStatus) -> "Subscription":
        return replace(self, status=status)


@dataclass(frozen=True)
class Notification:
    id: NotificationId
    account_id: AccountId
    title: str
    message: str
    kind: NotificationKind
    is_read: bool
    created_at: datetime

    def to_record(self) -> dict:
        """JSON-safe dict in the persisted notification layout."""
        return {
            "id": self.id,
            "user_id": self.account_id,
            "title": self.title,
            "message": self.message,
            "type": self.kind.value,
            "is_read": self.is_read,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_record(cls, record: dict) -> "Notification":
        """Inverse of to_record. Raises KeyError/ValueError on malformed input."""
        return cls(
            id=NotificationId(str(record["id"])),
            account_id=AccountId(str(record["user_id"])),
            title=str(record["title"]),
            message=str(record["message"]),
            kind=NotificationKind(record.get("type", "info")),
            is_read=bool(record.get("is_read", False)),
            created_at=datetime.fromisoformat(record["created_at"]),
        )


@dataclass(frozen=True)
class PlatformStats:
    total_users: int
    active_subscriptions: int
    recurring_revenue: Decimal
