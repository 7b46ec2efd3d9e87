"""Plan Enforcement — tests for draft normalization and subscription windows."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from subsflow.core.entities import PlanDraft
from subsflow.core.enforce_plan import normalize_plan_draft, subscription_window
from subsflow.core.errors import FieldValidationError


def test_blank_features_dropped_and_order_kept():
    draft = PlanDraft(
        name=" Pro ", price=Decimal("29.99"), duration_days=30,
        features=["B", "", "  ", " A "],
    )
    clean = normalize_plan_draft(draft)
    assert clean.name == "Pro"
    assert clean.features == ["B", "A"]


def test_float_price_becomes_exact_decimal():
    clean = normalize_plan_draft(PlanDraft(name="Basic", price=9.99))
    assert clean.price == Decimal("9.99")


def test_zero_price_allowed():
    assert normalize_plan_draft(PlanDraft(name="Free", price=Decimal("0"))).price == 0


def test_negative_price_rejected():
    with pytest.raises(FieldValidationError) as exc:
        normalize_plan_draft(PlanDraft(name="Bad", price=Decimal("-1")))
    assert exc.value.field == "price"


def test_non_numeric_price_rejected():
    with pytest.raises(FieldValidationError) as exc:
        normalize_plan_draft(PlanDraft(name="Bad", price="abc"))
    assert exc.value.field == "price"


@pytest.mark.parametrize("days", [0, -5])
def test_non_positive_duration_rejected(days):
    with pytest.raises(FieldValidationError) as exc:
        normalize_plan_draft(PlanDraft(name="Bad", duration_days=days))
    assert exc.value.field == "duration_days"


def test_blank_name_rejected():
    with pytest.raises(FieldValidationError) as exc:
        normalize_plan_draft(PlanDraft(name="   "))
    assert exc.value.field == "name"


def test_subscription_window_adds_duration_days():
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    begin, end = subscription_window(start, 30)
    assert begin == start
    assert end == datetime(2024, 1, 31, tzinfo=timezone.utc)
