"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache): single instance per process
    - Domain thresholds leave here only as explicit values (see promotion_policy)
"""

from datetime import timedelta
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tkd_core.core.eligibility import PromotionPolicy


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "postgresql+asyncpg://tkd:tkd@db:5432/tkd"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres hands out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Identity: header set by the auth proxy in front of the API
    identity_header: str = "X-User-Id"

    # Promotions
    min_time_in_grade_days: int = Field(default=90, ge=0)

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    def promotion_policy(self) -> PromotionPolicy:
        return PromotionPolicy(
            min_time_in_grade=timedelta(days=self.min_time_in_grade_days),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
