"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - AccountId, PlanId, SubscriptionId, NotificationId wrap str — opaque, never parsed
    - All valid states encoded as Enums — no raw string matching
    - Durable storage keys are the two fixed slots the client persists

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

AccountId = NewType("AccountId", str)
PlanId = NewType("PlanId", str)
SubscriptionId = NewType("SubscriptionId", str)
NotificationId = NewType("NotificationId", str)


# ─── Storage Keys ────────────────────────────────────────────────

SESSION_KEY = "session"
NOTIFICATIONS_KEY = "notifications"


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """Account role — admin unlocks catalog management and stats."""
    USER = "user"
    ADMIN = "admin"


class AuthStatus(str, Enum):
    """Tri-state of the current identity. Callers key their whole view off it."""
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class NotificationKind(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
