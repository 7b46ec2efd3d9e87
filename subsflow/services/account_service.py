"""Account Service — sign-up, sign-in, sign-out and profile lookup.

Invariants:
    - sign_up: validate → register → start session → append welcome notification
    - sign_in: verify → start session; unknown email and wrong password are
      indistinguishable (InvalidCredentialsError)
    - Every operation first awaits simulated latency; that sleep is the
      cancellation point
    - Once the latency has elapsed the state changes run shielded: cancelling
      the caller never leaves an account without its session and welcome message

Design Decisions:
    - Welcome text is fixed; only the full name is interpolated
    - load_profile doubles as the SessionManager's ProfileLoader for restore
"""

import asyncio
import logging

from subsflow.core.domain_types import AccountId, NotificationKind, Role
from subsflow.core.entities import Account, CurrentIdentity, Profile
from subsflow.core.enforce_registration import validate_registration
from subsflow.core.errors import InvalidCredentialsError
from subsflow.services.credential_store import CredentialStore
from subsflow.services.latency import simulate_latency
from subsflow.services.notification_log import NotificationLog
from subsflow.services.session_manager import SessionManager

logger = logging.getLogger(__name__)

WELCOME_TITLE = "Welcome!"
WELCOME_MESSAGE = (
    "Welcome to our subscription platform, {full_name}! "
    "Explore our plans and get started."
)


_shielded_tasks: set[asyncio.Task] = set()


def _shielded(coro):
    """Run coro to completion even if the awaiting caller is cancelled.

    A caller cancelled mid-flight never awaits the inner task, so its outcome
    is consumed here instead of surfacing as "exception was never retrieved".
    """
    task = asyncio.ensure_future(coro)
    _shielded_tasks.add(task)
    task.add_done_callback(_consume_outcome)
    return asyncio.shield(task)


def _consume_outcome(task: asyncio.Task) -> None:
    _shielded_tasks.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug(f"Shielded step finished with {type(exc).__name__}: {exc}")


class AccountService:
    """Registration and login on top of the credential store and session manager."""

    def __init__(
        self,
        credentials: CredentialStore,
        sessions: SessionManager,
        notifications: NotificationLog,
        sign_in_latency_ms: int = 0,
        sign_up_latency_ms: int = 0,
        sign_out_latency_ms: int = 0,
        profile_latency_ms: int = 0,
    ):
        self.credentials = credentials
        self.sessions = sessions
        self.notifications = notifications
        self.sign_in_latency_ms = sign_in_latency_ms
        self.sign_up_latency_ms = sign_up_latency_ms
        self.sign_out_latency_ms = sign_out_latency_ms
        self.profile_latency_ms = profile_latency_ms

    @property
    def identity(self) -> CurrentIdentity:
        return self.sessions.identity

    async def sign_up(
        self, email: str, password: str, full_name: str, role: str | Role = Role.USER,
    ) -> Profile:
        """Register a new account, sign it in and greet it."""
        email, password, full_name, parsed_role = validate_registration(
            email, password, full_name, role,
        )
        await simulate_latency(self.sign_up_latency_ms)
        account = await _shielded(
            self._complete_sign_up(email, password, full_name, parsed_role),
        )
        return account.profile

    async def _complete_sign_up(
        self, email: str, password: str, full_name: str, role: Role,
    ) -> Account:
        account = await self.credentials.register(email, password, full_name, role)
        await self.sessions.start(account)
        await self.notifications.append(
            account.id,
            WELCOME_TITLE,
            WELCOME_MESSAGE.format(full_name=full_name),
            NotificationKind.SUCCESS,
        )
        return account

    async def sign_in(self, email: str, password: str) -> Profile:
        """Verify credentials and start a session."""
        await simulate_latency(self.sign_in_latency_ms)
        try:
            account = await self.credentials.verify(email, password)
        except InvalidCredentialsError as e:
            logger.info("Sign-in rejected", extra={"error_code": e.code})
            raise
        await _shielded(self.sessions.start(account))
        return account.profile

    async def sign_out(self) -> None:
        await simulate_latency(self.sign_out_latency_ms)
        await self.sessions.end()

    async def load_profile(self, account_id: AccountId) -> Profile | None:
        """Fetch an account's profile as an out-of-process lookup would."""
        await simulate_latency(self.profile_latency_ms)
        account = await self.credentials.lookup_id(account_id)
        return account.profile if account else None

    async def restore_session(self) -> CurrentIdentity:
        await self.sessions.restore(self.load_profile)
        return self.sessions.identity
