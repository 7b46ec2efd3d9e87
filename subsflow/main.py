"""SubsFlow API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map SubsFlowError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database, schema, demo data and Platform set up in the lifespan
    - Session restoration runs as a background task; identity reads "loading"
      until it settles

Design Decisions:
    - Lifespan over @app.on_event
    - The restore task is cancelled on shutdown if still pending
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from subsflow.api.error_handlers import register_error_handlers
from subsflow.api.routes import auth, health, notifications, plans, stats, subscriptions
from subsflow.config import get_settings
from subsflow.infrastructure.database import init_db
from subsflow.infrastructure.observability import setup_logging
from subsflow.services.platform import build_sql_platform

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    await db.create_schema()

    platform = build_sql_platform(db, settings)
    if settings.seed_demo_data:
        await platform.seed()
    app.state.platform = platform

    platform.sessions.mark_loading()
    restore_task = asyncio.create_task(platform.accounts.restore_session())
    logger.info("SubsFlow API started")
    yield
    logger.info("SubsFlow API shutting down")
    if not restore_task.done():
        restore_task.cancel()
        await asyncio.gather(restore_task, return_exceptions=True)
    await db.dispose()


app = FastAPI(
    title="SubsFlow API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(plans.router)
app.include_router(subscriptions.router)
app.include_router(notifications.router)
app.include_router(stats.router)

register_error_handlers(app)
