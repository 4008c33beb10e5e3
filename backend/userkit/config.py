"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - Connection strings come from environment variables (never hardcoded credentials in deploys)
    - get_settings() is cached (lru_cache): single instance per process
    - No token secret is configured here; callers pass it on every codec call
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


def normalize_database_url(url: str) -> str:
    """Hosted providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://userkit:userkit@db:5432/userkit"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Rewrite bare postgresql:// URLs to the asyncpg driver."""
        if isinstance(v, str):
            return normalize_database_url(v)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Collections
    user_collection_domain: str = "user"
    user_collection_subdomain: str = "info"

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
