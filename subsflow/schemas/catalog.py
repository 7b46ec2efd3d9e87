"""Catalog Schemas — plans, subscriptions and dashboard stats at the API boundary.

Invariants:
    - PlanWrite.price >= 0, duration_days > 0, name 1-200 chars after strip
    - Blank features are dropped before reaching the catalog
    - Money is serialized as a decimal string
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from subsflow.core.entities import Plan, PlanDraft, PlatformStats, Subscription


class PlanWrite(BaseModel):
    """Create/update body. Mirrors the admin plan form."""
    name: str = Field(min_length=1, max_length=200)
    description: str = Field("", max_length=2000)
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    duration_days: int = Field(30, gt=0, le=3650)
    features: list[str] = Field(default_factory=list, max_length=50)
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Plan name is required")
        return v

    @field_validator("features")
    @classmethod
    def drop_blank_features(cls, v: list[str]) -> list[str]:
        return [f.strip() for f in v if f.strip()]

    def to_draft(self) -> PlanDraft:
        return PlanDraft(
            name=self.name,
            description=self.description,
            price=self.price,
            duration_days=self.duration_days,
            features=list(self.features),
            is_active=self.is_active,
        )


class PlanActiveUpdate(BaseModel):
    is_active: bool


class PlanResponse(BaseModel):
    id: str
    name: str
    description: str
    price: Decimal
    duration_days: int
    features: list[str]
    is_active: bool

    @classmethod
    def from_entity(cls, plan: Plan) -> "PlanResponse":
        return cls(
            id=plan.id, name=plan.name, description=plan.description,
            price=plan.price, duration_days=plan.duration_days,
            features=list(plan.features), is_active=plan.is_active,
        )


class SubscribeRequest(BaseModel):
    plan_id: str = Field(min_length=1, max_length=64)


class SubscriptionResponse(BaseModel):
    id: str
    account_id: str
    plan_id: str
    plan_name: str
    price: Decimal
    duration_days: int
    status: str
    start_date: datetime
    end_date: datetime

    @classmethod
    def from_entity(cls, sub: Subscription) -> "SubscriptionResponse":
        return cls(
            id=sub.id, account_id=sub.account_id, plan_id=sub.plan_id,
            plan_name=sub.plan_name, price=sub.price,
            duration_days=sub.duration_days, status=sub.status.value,
            start_date=sub.start_date, end_date=sub.end_date,
        )


class StatsResponse(BaseModel):
    total_users: int
    active_subscriptions: int
    recurring_revenue: Decimal

    @classmethod
    def from_entity(cls, stats: PlatformStats) -> "StatsResponse":
        return cls(
            total_users=stats.total_users,
            active_subscriptions=stats.active_subscriptions,
            recurring_revenue=stats.recurring_revenue,
        )
