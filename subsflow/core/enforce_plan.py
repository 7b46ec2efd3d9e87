"""Plan Enforcement — pure validation of plan drafts and subscription windows.

Invariants:
    - price >= 0, duration_days > 0, name non-blank
    - Blank features are dropped; feature order is preserved
    - subscription_window is end = start + duration_days (no calendar math)
"""

from dataclasses import replace
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation

from subsflow.core.entities import PlanDraft
from subsflow.core.errors import FieldValidationError


def normalize_plan_draft(draft: PlanDraft) -> PlanDraft:
    """Validate and clean a draft. Pure — returns a new PlanDraft."""
    name = draft.name.strip()
    if not name:
        raise FieldValidationError("Plan name is required", "name")

    try:
        price = Decimal(str(draft.price))
    except (InvalidOperation, TypeError, ValueError):
        raise FieldValidationError("Price must be a number", "price") from None
    if not price.is_finite() or price < 0:
        raise FieldValidationError("Price cannot be negative", "price")

    if draft.duration_days <= 0:
        raise FieldValidationError(
            "Duration must be at least one day", "duration_days",
        )

    features = [f.strip() for f in draft.features if f and f.strip()]
    return replace(
        draft, name=name, description=draft.description.strip(),
        price=price, features=features,
    )


def subscription_window(
    start: datetime, duration_days: int,
) -> tuple[datetime, datetime]:
    return start, start + timedelta(days=duration_days)
