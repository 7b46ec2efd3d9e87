"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every setting has a working default (the demo runs with no environment)
    - get_settings() is cached (lru_cache) — single instance per process
    - Latencies are in milliseconds; 0 disables the simulated delay

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - SQLite file by default; postgresql:// URLs are rewritten for asyncpg
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="SUBSFLOW_", case_sensitive=False,
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./subsflow.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres URLs come as postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Simulated backend latency (ms)
    sign_in_latency_ms: int = 500
    sign_up_latency_ms: int = 500
    sign_out_latency_ms: int = 200
    profile_latency_ms: int = 300
    mutation_latency_ms: int = 100

    # Demo data
    seed_demo_data: bool = True

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
