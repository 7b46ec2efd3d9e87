"""Session Manager — persistence, restoration and the tri-state identity.

Invariants:
    - start() writes {"user": {"id", "email"}} under "session"
    - A fresh manager over the same store restores the same account id
    - Corrupt or stale records restore to ANONYMOUS without raising
    - identity is LOADING while the profile lookup is pending
    - Cancelling restore() leaves ANONYMOUS and keeps the record
"""

import asyncio
import json

import pytest

from subsflow.core.domain_types import AccountId, AuthStatus, Role
from subsflow.core.entities import Account
from subsflow.infrastructure.memory_store import InMemoryDocumentStore
from subsflow.services.session_manager import SessionManager

ACCOUNT = Account(
    id=AccountId("user1"), email="user@example.com",
    credential="user123", full_name="John Doe", role=Role.USER,
)


async def _load_profile(account_id):
    return ACCOUNT.profile if account_id == ACCOUNT.id else None


@pytest.fixture
def store():
    return InMemoryDocumentStore()


async def test_new_manager_is_anonymous(store):
    manager = SessionManager(store)
    assert manager.status == AuthStatus.ANONYMOUS
    assert manager.identity.profile is None


async def test_start_persists_record_and_authenticates(store):
    manager = SessionManager(store)
    session = await manager.start(ACCOUNT)

    assert session.account_id == "user1"
    assert json.loads(await store.get("session")) == {
        "user": {"id": "user1", "email": "user@example.com"},
    }
    assert manager.status == AuthStatus.AUTHENTICATED
    assert manager.identity.profile == ACCOUNT.profile


async def test_restore_in_fresh_manager_yields_same_account(store):
    await SessionManager(store).start(ACCOUNT)

    fresh = SessionManager(store)
    restored = await fresh.restore(_load_profile)

    assert restored.account_id == ACCOUNT.id
    assert fresh.status == AuthStatus.AUTHENTICATED
    assert fresh.identity.profile.full_name == "John Doe"


async def test_restore_without_record_is_anonymous(store):
    manager = SessionManager(store)
    assert await manager.restore(_load_profile) is None
    assert manager.status == AuthStatus.ANONYMOUS


async def test_restore_corrupt_json_is_anonymous(store):
    await store.put("session", "{corrupt")
    manager = SessionManager(store)
    assert await manager.restore(_load_profile) is None
    assert manager.status == AuthStatus.ANONYMOUS


async def test_restore_unknown_account_clears_stale_record(store):
    await store.put("session", json.dumps({"user": {"id": "ghost", "email": "g@x"}}))
    manager = SessionManager(store)

    assert await manager.restore(_load_profile) is None
    assert manager.status == AuthStatus.ANONYMOUS
    assert await store.get("session") is None


async def test_restore_survives_a_failing_profile_lookup(store):
    await SessionManager(store).start(ACCOUNT)

    async def broken(account_id):
        raise RuntimeError("profile service down")

    manager = SessionManager(store)
    assert await manager.restore(broken) is None
    assert manager.status == AuthStatus.ANONYMOUS


async def test_identity_is_loading_while_profile_pending(store):
    await SessionManager(store).start(ACCOUNT)
    release = asyncio.Event()

    async def slow_profile(account_id):
        await release.wait()
        return ACCOUNT.profile

    manager = SessionManager(store)
    task = asyncio.create_task(manager.restore(slow_profile))
    await asyncio.sleep(0)
    assert manager.status == AuthStatus.LOADING

    waiter = asyncio.create_task(manager.wait_until_settled())
    await asyncio.sleep(0)
    assert not waiter.done()

    release.set()
    await task
    identity = await waiter
    assert identity.status == AuthStatus.AUTHENTICATED


async def test_cancelled_restore_is_anonymous_and_keeps_record(store):
    await SessionManager(store).start(ACCOUNT)

    async def never(account_id):
        await asyncio.Event().wait()

    manager = SessionManager(store)
    task = asyncio.create_task(manager.restore(never))
    await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert manager.status == AuthStatus.ANONYMOUS
    assert await store.get("session") is not None


async def test_end_clears_record_and_identity(store):
    manager = SessionManager(store)
    await manager.start(ACCOUNT)
    await manager.end()

    assert manager.status == AuthStatus.ANONYMOUS
    assert await store.get("session") is None
    assert await SessionManager(store).restore(_load_profile) is None


async def test_last_writer_wins(store):
    other = Account(
        id=AccountId("admin1"), email="admin@example.com",
        credential="admin123", full_name="Admin User", role=Role.ADMIN,
    )
    manager = SessionManager(store)
    await manager.start(ACCOUNT)
    await manager.start(other)
    assert json.loads(await store.get("session"))["user"]["id"] == "admin1"


ADMIN = Account(
    id=AccountId("admin1"), email="admin@example.com",
    credential="admin123", full_name="Admin User", role=Role.ADMIN,
)


def _gated_loader(release: asyncio.Event):
    async def load(account_id):
        await release.wait()
        return {ACCOUNT.id: ACCOUNT.profile, ADMIN.id: ADMIN.profile}.get(account_id)
    return load


async def test_start_during_restore_wins(store):
    await SessionManager(store).start(ADMIN)
    release = asyncio.Event()

    manager = SessionManager(store)
    task = asyncio.create_task(manager.restore(_gated_loader(release)))
    await asyncio.sleep(0)
    await manager.start(ACCOUNT)
    release.set()
    restored = await task

    assert restored.account_id == "user1"
    assert manager.identity.profile == ACCOUNT.profile
    assert json.loads(await store.get("session"))["user"]["id"] == "user1"


async def test_end_during_restore_wins(store):
    await SessionManager(store).start(ADMIN)
    release = asyncio.Event()

    manager = SessionManager(store)
    task = asyncio.create_task(manager.restore(_gated_loader(release)))
    await asyncio.sleep(0)
    await manager.end()
    release.set()

    assert await task is None
    assert manager.status == AuthStatus.ANONYMOUS
    assert await store.get("session") is None


async def test_stale_record_cleanup_keeps_session_started_meanwhile(store):
    await store.put("session", json.dumps({"user": {"id": "ghost", "email": "g@x"}}))
    release = asyncio.Event()

    manager = SessionManager(store)
    task = asyncio.create_task(manager.restore(_gated_loader(release)))
    await asyncio.sleep(0)
    await manager.start(ACCOUNT)
    release.set()
    await task

    assert manager.status == AuthStatus.AUTHENTICATED
    assert json.loads(await store.get("session"))["user"]["id"] == "user1"


async def test_cancelled_restore_keeps_session_started_meanwhile(store):
    await SessionManager(store).start(ADMIN)
    release = asyncio.Event()

    manager = SessionManager(store)
    task = asyncio.create_task(manager.restore(_gated_loader(release)))
    await asyncio.sleep(0)
    await manager.start(ACCOUNT)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert manager.status == AuthStatus.AUTHENTICATED
    assert manager.identity.session.account_id == "user1"
