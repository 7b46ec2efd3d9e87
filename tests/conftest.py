"""Root conftest — shared test configuration."""

import os

# Tests never touch a real database file
os.environ.setdefault("SUBSFLOW_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SUBSFLOW_SEED_DEMO_DATA", "false")

import pytest  # noqa: E402

from subsflow.config import Settings  # noqa: E402


@pytest.fixture
def fast_settings() -> Settings:
    """Settings with every simulated latency disabled."""
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite:///:memory:",
        sign_in_latency_ms=0,
        sign_up_latency_ms=0,
        sign_out_latency_ms=0,
        profile_latency_ms=0,
        mutation_latency_ms=0,
        seed_demo_data=False,
    )
