"""Credential Store — email → account records with atomic registration.

Invariants:
    - register() checks and inserts under one asyncio.Lock: two concurrent
      registrations of the same email can never both succeed
    - verify() raises the same InvalidCredentialsError for an unknown email
      and for a wrong credential
    - Credentials are compared with hmac.compare_digest
    - Emails are matched exactly as given (case-sensitive)

Design Decisions:
    - Account ids are uuid4 hex strings unless the caller supplies one (demo seeds do)
    - The store never logs credentials
"""

import asyncio
import hmac
import logging
import uuid

from subsflow.core.domain_types import AccountId, Role
from subsflow.core.entities import Account
from subsflow.core.errors import AlreadyExistsError, InvalidCredentialsError
from subsflow.core.repository_protocols import AccountRepository

logger = logging.getLogger(__name__)


def new_account_id() -> AccountId:
    return AccountId(f"user_{uuid.uuid4().hex}")


class CredentialStore:
    """Registration, lookup and verification over an injected AccountRepository."""

    def __init__(self, accounts: AccountRepository):
        self.accounts = accounts
        self._register_lock = asyncio.Lock()

    async def register(
        self,
        email: str,
        credential: str,
        full_name: str,
        role: Role,
        account_id: AccountId | None = None,
    ) -> Account:
        """Create an account. Raises AlreadyExistsError if the email is taken."""
        async with self._register_lock:
            if await self.accounts.get_by_email(email) is not None:
                logger.info("Registration rejected: email already registered")
                raise AlreadyExistsError(email)
            account = Account(
                id=account_id or new_account_id(),
                email=email,
                credential=credential,
                full_name=full_name,
                role=role,
            )
            await self.accounts.add(account)

        logger.info(
            "Account registered",
            extra={"account_id": account.id},
        )
        return account

    async def lookup(self, email: str) -> Account | None:
        return await self.accounts.get_by_email(email)

    async def lookup_id(self, account_id: AccountId) -> Account | None:
        return await self.accounts.get_by_id(account_id)

    async def verify(self, email: str, credential: str) -> Account:
        """Return the matching account or raise InvalidCredentialsError."""
        account = await self.accounts.get_by_email(email)
        if account is None:
            raise InvalidCredentialsError()
        if not hmac.compare_digest(
            account.credential.encode("utf-8"), credential.encode("utf-8"),
        ):
            raise InvalidCredentialsError()
        return account

    async def count(self) -> int:
        return await self.accounts.count()
