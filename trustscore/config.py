"""Configuration management using Pydantic Settings."""
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Trust Score Engine"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (any SQLAlchemy URL with INSERT ... ON CONFLICT support)
    database_url: str = "sqlite:///./trustscore.db"

    # Redis
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0

    # Cache TTLs (seconds)
    cache_ttl_weight_config: int = 30
    cache_ttl_baseline: int = 30

    # Batch / sandbox scoring
    batch_max_workers: int = 4
    batch_max_duration_seconds: float = 300.0
    batch_drain_grace_seconds: float = 30.0
    sandbox_ttl_minutes: int = 10

    # Industry used when an employer or candidate has none on file
    default_industry: str = "corporate"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
