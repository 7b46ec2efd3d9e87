"""Credential Store — registration uniqueness, lookup and verification.

Invariants:
    - A second register() with the same email fails and leaves the first account intact
    - Concurrent registrations of one email: exactly one succeeds
    - verify() gives one error for unknown email and wrong credential
"""

import asyncio

import pytest

from subsflow.core.domain_types import Role
from subsflow.core.errors import AlreadyExistsError, InvalidCredentialsError
from subsflow.infrastructure.memory_store import InMemoryAccountRepository
from subsflow.services.credential_store import CredentialStore


class _SlowAccountRepository(InMemoryAccountRepository):
    """Yields to the event loop inside every call to expose interleavings."""

    async def get_by_email(self, email):
        await asyncio.sleep(0)
        return await super().get_by_email(email)

    async def add(self, account):
        await asyncio.sleep(0)
        await super().add(account)


@pytest.fixture
def store():
    return CredentialStore(InMemoryAccountRepository())


async def test_register_then_lookup(store):
    account = await store.register("new@example.com", "pw", "Jane Doe", Role.USER)
    assert await store.lookup("new@example.com") == account
    assert await store.lookup_id(account.id) == account
    assert await store.count() == 1


async def test_duplicate_register_fails_and_keeps_first(store):
    first = await store.register("dup@example.com", "pw1", "First", Role.USER)
    with pytest.raises(AlreadyExistsError):
        await store.register("dup@example.com", "pw2", "Second", Role.ADMIN)

    stored = await store.lookup("dup@example.com")
    assert stored == first
    assert stored.full_name == "First"
    assert stored.credential == "pw1"
    assert await store.count() == 1


async def test_email_match_is_case_sensitive(store):
    await store.register("Case@example.com", "pw", "A", Role.USER)
    assert await store.lookup("case@example.com") is None
    await store.register("case@example.com", "pw", "B", Role.USER)
    assert await store.count() == 2


async def test_concurrent_registrations_only_one_succeeds():
    store = CredentialStore(_SlowAccountRepository())
    results = await asyncio.gather(
        *(store.register("race@example.com", "pw", f"N{i}", Role.USER) for i in range(5)),
        return_exceptions=True,
    )
    successes = [r for r in results if not isinstance(r, Exception)]
    failures = [r for r in results if isinstance(r, AlreadyExistsError)]
    assert len(successes) == 1
    assert len(failures) == 4
    assert await store.count() == 1


async def test_verify_returns_matching_account(store):
    account = await store.register("a@example.com", "secret", "A", Role.ADMIN)
    assert await store.verify("a@example.com", "secret") == account


async def test_verify_unknown_and_wrong_credential_are_indistinguishable(store):
    await store.register("a@example.com", "secret", "A", Role.USER)
    with pytest.raises(InvalidCredentialsError) as unknown:
        await store.verify("nobody@example.com", "secret")
    with pytest.raises(InvalidCredentialsError) as wrong:
        await store.verify("a@example.com", "nope")
    assert unknown.value.message == wrong.value.message
    assert unknown.value.code == wrong.value.code
