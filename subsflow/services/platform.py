"""Platform — composition root wiring stores into the five services.

Invariants:
    - One Platform per process; it owns the single SessionManager
    - Services receive stores by injection (in-memory or SQL), never construct them
    - stats() reads accounts and the ledger at call time (no caching)

Design Decisions:
    - build_memory_platform for tests and scripts, build_sql_platform for the API
    - Latencies come from Settings so tests can zero them
"""

from dataclasses import dataclass

from subsflow.config import Settings, get_settings
from subsflow.core.entities import PlatformStats
from subsflow.core.platform_stats import compute_platform_stats
from subsflow.core.repository_protocols import (
    AccountRepository, DocumentStore, PlanRepository, SubscriptionRepository,
)
from subsflow.infrastructure.database import DatabaseSessionManager
from subsflow.infrastructure.memory_store import (
    InMemoryAccountRepository, InMemoryDocumentStore,
    InMemoryPlanRepository, InMemorySubscriptionRepository,
)
from subsflow.infrastructure.sql_store import (
    SqlAccountRepository, SqlDocumentStore,
    SqlPlanRepository, SqlSubscriptionRepository,
)
from subsflow.services.account_service import AccountService
from subsflow.services.credential_store import CredentialStore
from subsflow.services.notification_log import NotificationLog
from subsflow.services.plan_catalog import PlanCatalog
from subsflow.services.seed_data import seed_demo_data
from subsflow.services.session_manager import SessionManager
from subsflow.services.subscription_ledger import SubscriptionLedger


@dataclass
class Platform:
    """Everything the outer surface (API, scripts) may call."""
    credentials: CredentialStore
    sessions: SessionManager
    accounts: AccountService
    catalog: PlanCatalog
    ledger: SubscriptionLedger
    notifications: NotificationLog

    async def stats(self) -> PlatformStats:
        return compute_platform_stats(
            await self.credentials.count(), await self.ledger.list_all(),
        )

    async def seed(self) -> None:
        await seed_demo_data(self.credentials, self.catalog)


def build_platform(
    documents: DocumentStore,
    accounts: AccountRepository,
    plans: PlanRepository,
    subscriptions: SubscriptionRepository,
    settings: Settings | None = None,
) -> Platform:
    settings = settings or get_settings()
    credentials = CredentialStore(accounts)
    sessions = SessionManager(documents)
    notifications = NotificationLog(
        documents, credentials, latency_ms=settings.mutation_latency_ms,
    )
    catalog = PlanCatalog(plans, latency_ms=settings.mutation_latency_ms)
    ledger = SubscriptionLedger(
        subscriptions, catalog, credentials,
        latency_ms=settings.mutation_latency_ms,
    )
    account_service = AccountService(
        credentials, sessions, notifications,
        sign_in_latency_ms=settings.sign_in_latency_ms,
        sign_up_latency_ms=settings.sign_up_latency_ms,
        sign_out_latency_ms=settings.sign_out_latency_ms,
        profile_latency_ms=settings.profile_latency_ms,
    )
    return Platform(
        credentials=credentials,
        sessions=sessions,
        accounts=account_service,
        catalog=catalog,
        ledger=ledger,
        notifications=notifications,
    )


def build_memory_platform(
    settings: Settings | None = None, documents: DocumentStore | None = None,
) -> Platform:
    """Platform over dicts. Pass documents to share a session slot across instances."""
    return build_platform(
        documents or InMemoryDocumentStore(),
        InMemoryAccountRepository(),
        InMemoryPlanRepository(),
        InMemorySubscriptionRepository(),
        settings,
    )


def build_sql_platform(
    db: DatabaseSessionManager, settings: Settings | None = None,
) -> Platform:
    return build_platform(
        SqlDocumentStore(db),
        SqlAccountRepository(db),
        SqlPlanRepository(db),
        SqlSubscriptionRepository(db),
        settings,
    )
