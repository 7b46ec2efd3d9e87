"""Session Manager — issues, persists and restores the single process-wide session.

Invariants:
    - At most one active session per process; the durable slot is last-writer-wins
    - identity is LOADING only while restore() is in flight
    - restore() NEVER raises for bad stored data: absent, malformed or
      unparseable records read as ANONYMOUS
    - A stored session pointing at an unknown account reads as ANONYMOUS and
      the stale record is cleared
    - Cancelling restore() leaves identity ANONYMOUS and the stored record intact
    - end() clears both the durable slot and the in-memory identity
    - A start() or end() that lands while restore() is pending is never
      overwritten: restore() neither settles identity nor deletes the record

Design Decisions:
    - Profile lookup is injected as an async callable (ProfileLoader) so the
      Account Service can supply it without a circular dependency
    - wait_until_settled() backs identity-dependent API routes: they block
      until restoration resolves instead of reading a LOADING identity
"""

import asyncio
import logging
from typing import Awaitable, Callable

from subsflow.core.domain_types import SESSION_KEY, AccountId, AuthStatus
from subsflow.core.entities import Account, CurrentIdentity, Profile, Session
from subsflow.core.repository_protocols import DocumentStore
from subsflow.core.session_record import session_from_record, session_to_record

logger = logging.getLogger(__name__)

ProfileLoader = Callable[[AccountId], Awaitable[Profile | None]]

_ANONYMOUS = CurrentIdentity(status=AuthStatus.ANONYMOUS)


class SessionManager:
    """Owns the current identity and its durable session record."""

    def __init__(self, store: DocumentStore, storage_key: str = SESSION_KEY):
        self.store = store
        self.storage_key = storage_key
        self._identity = _ANONYMOUS
        self._settled = asyncio.Event()
        self._settled.set()
        # Bumped by start()/end(); restore() compares it to detect being superseded
        self._generation = 0
        self._write_lock = asyncio.Lock()

    @property
    def identity(self) -> CurrentIdentity:
        return self._identity

    @property
    def status(self) -> AuthStatus:
        return self._identity.status

    def mark_loading(self) -> None:
        """Enter LOADING before a restore task is scheduled.

        Lets a caller that starts restore() in the background guarantee
        that nobody observes ANONYMOUS in between.
        """
        self._identity = CurrentIdentity(status=AuthStatus.LOADING)
        self._settled.clear()

    async def wait_until_settled(self) -> CurrentIdentity:
        await self._settled.wait()
        return self._identity

    async def start(self, account: Account) -> Session:
        """Persist a session for account and make it the current identity."""
        self._generation += 1
        session = Session(account_id=account.id, email=account.email)
        async with self._write_lock:
            await self.store.put(self.storage_key, session_to_record(session))
        self._settle(CurrentIdentity(
            status=AuthStatus.AUTHENTICATED,
            session=session,
            profile=account.profile,
        ))
        logger.info(
            "Session started",
            extra={"account_id": account.id, "auth_status": self.status.value},
        )
        return session

    async def restore(self, load_profile: ProfileLoader) -> Session | None:
        """Rehydrate identity from the durable slot.

        Returns the session that is current once restore finishes, None when
        anonymous. A start() or end() that lands while restore is pending
        wins: restore then leaves identity and the durable slot untouched.
        """
        self.mark_loading()
        generation = self._generation
        try:
            session = session_from_record(await self.store.get(self.storage_key))
            if session is None:
                self._settle_if_current(generation, _ANONYMOUS)
                return self._identity.session

            profile = await load_profile(session.account_id)
            if profile is None:
                async with self._write_lock:
                    if self._generation == generation:
                        logger.warning(
                            "Stored session references an unknown account; discarding",
                            extra={"account_id": session.account_id},
                        )
                        await self.store.delete(self.storage_key)
                self._settle_if_current(generation, _ANONYMOUS)
                return self._identity.session

            restored = self._settle_if_current(generation, CurrentIdentity(
                status=AuthStatus.AUTHENTICATED,
                session=session,
                profile=profile,
            ))
            if restored:
                logger.info(
                    "Session restored", extra={"account_id": session.account_id},
                )
            return self._identity.session
        except asyncio.CancelledError:
            logger.info("Session restore cancelled")
            self._settle_if_current(generation, _ANONYMOUS)
            raise
        except Exception as e:
            logger.error(f"Session restore failed: {e}", exc_info=True)
            self._settle_if_current(generation, _ANONYMOUS)
            return self._identity.session

    async def end(self) -> None:
        """Clear the durable record and the in-memory identity."""
        self._generation += 1
        account_id = self._identity.session.account_id if self._identity.session else None
        async with self._write_lock:
            await self.store.delete(self.storage_key)
        self._settle(_ANONYMOUS)
        logger.info("Session ended", extra={"account_id": account_id})

    def _settle_if_current(self, generation: int, identity: CurrentIdentity) -> bool:
        if self._generation != generation:
            logger.info(
                "Session restore superseded",
                extra={"auth_status": self.status.value},
            )
            return False
        self._settle(identity)
        return True

    def _settle(self, identity: CurrentIdentity) -> None:
        self._identity = identity
        self._settled.set()
