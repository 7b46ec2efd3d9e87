"""SQL repositories — the same platform semantics over SQLite (aiosqlite).

Invariants:
    - Plans keep insertion order across update and delete
    - Prices round-trip as Decimal
    - A session persisted by one platform is restored by a fresh one sharing the database
"""

import json
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from subsflow.core.domain_types import AccountId, AuthStatus, PlanId, SubscriptionStatus
from subsflow.core.entities import PlanDraft
from subsflow.core.errors import ResourceNotFoundError
from subsflow.infrastructure.sql_store import SqlDocumentStore
from subsflow.services.platform import build_sql_platform


async def test_document_store_put_get_delete(test_db):
    store = SqlDocumentStore(test_db)
    assert await store.get("session") is None
    await store.put("session", "one")
    await store.put("session", "two")
    assert await store.get("session") == "two"
    await store.delete("session")
    assert await store.get("session") is None
    await store.delete("session")


async def test_seeded_plans_keep_order_and_prices(sql_platform):
    plans = await sql_platform.catalog.list_plans()
    assert [p.id for p in plans] == ["1", "2", "3"]
    assert plans[0].price == Decimal("9.99")
    assert plans[2].features


async def test_plan_update_and_create_keep_order(sql_platform):
    await sql_platform.catalog.update_plan(PlanId("1"), PlanDraft(
        name="Basic Plan v2", price=Decimal("12.50"), duration_days=30,
    ))
    created = await sql_platform.catalog.create_plan(PlanDraft(
        name="Team", price=Decimal("49.00"), duration_days=30,
    ))
    await sql_platform.catalog.delete_plan(PlanId("2"))

    plans = await sql_platform.catalog.list_plans()
    assert [p.id for p in plans] == ["1", "3", created.id]
    assert plans[0].name == "Basic Plan v2"
    assert plans[0].price == Decimal("12.50")


async def test_subscription_snapshot_survives_plan_deletion(sql_platform):
    user = AccountId("user1")
    sub = await sql_platform.ledger.subscribe(user, PlanId("3"))
    await sql_platform.catalog.delete_plan(PlanId("3"))

    stored = await sql_platform.ledger.list_for(user)
    assert [s.id for s in stored] == [sub.id]
    assert stored[0].price == Decimal("99.99")
    assert stored[0].plan_name == "Enterprise"
    assert stored[0].end_date == sub.end_date
    assert await sql_platform.ledger.recurring_revenue() == Decimal("99.99")


async def test_expire_lapsed_persists_status(sql_platform):
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    await sql_platform.ledger.subscribe(AccountId("user1"), PlanId("1"), now=start)
    assert await sql_platform.ledger.expire_lapsed(start + timedelta(days=40)) == 1
    subs = await sql_platform.ledger.list_all()
    assert subs[0].status == SubscriptionStatus.EXPIRED


async def test_sign_up_persists_account_and_notification(sql_platform):
    profile = await sql_platform.accounts.sign_up(
        "new@example.com", "secret", "New Person",
    )
    assert await sql_platform.credentials.count() == 3
    stored = await sql_platform.notifications.store.get("notifications")
    assert json.loads(stored)[0]["user_id"] == profile.id


async def test_session_restored_by_fresh_platform(sql_platform, test_db, fast_settings):
    await sql_platform.accounts.sign_in("user@example.com", "user123")

    fresh = build_sql_platform(test_db, fast_settings)
    identity = await fresh.accounts.restore_session()

    assert identity.status == AuthStatus.AUTHENTICATED
    assert identity.profile.full_name == "John Doe"


async def test_sign_out_clears_persisted_session(sql_platform, test_db, fast_settings):
    await sql_platform.accounts.sign_in("user@example.com", "user123")
    await sql_platform.accounts.sign_out()

    fresh = build_sql_platform(test_db, fast_settings)
    identity = await fresh.accounts.restore_session()
    assert identity.status == AuthStatus.ANONYMOUS


async def test_unknown_account_is_not_found_not_storage_error(sql_platform):
    with pytest.raises(ResourceNotFoundError):
        await sql_platform.ledger.subscribe(AccountId("ghost"), PlanId("1"))
    with pytest.raises(ResourceNotFoundError):
        await sql_platform.notifications.append(AccountId("ghost"), "Hi", "x")
    assert await sql_platform.ledger.list_all() == []
    assert await sql_platform.notifications.store.get("notifications") is None
