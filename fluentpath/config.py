"""
Application configuration using pydantic-settings.
Loads from environment variables with .env file support.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database (document store backend)
    database_url: str = "sqlite+aiosqlite:///./fluentpath.db"

    # Identity provider tokens
    secret_key: str = "change-this-in-production-minimum-32-characters-long"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440  # 24 hours

    # Progress ledger
    progress_timezone: str = "UTC"  # IANA zone; day boundary = local midnight
    transaction_max_attempts: int = 5

    # Generative-text providers (server-side fallback keys)
    gemini_api_key: str = ""
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_default_model: str = "gemini-2.5-flash"
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_default_model: str = "openai/gpt-4o-mini"
    ai_request_timeout_seconds: float = 60.0

    # Application
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR

    # API Settings
    api_v1_prefix: str = "/api/v1"
    project_name: str = "FluentPath Learning API"
    version: str = "1.0.0"

    # Rate limiting (API Gateway)
    rate_limit_api_per_minute: int = 100   # per learner or IP for general API
    rate_limit_ai_per_hour: int = 60       # per learner for generative-text endpoints
    rate_limit_enabled: bool = True


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
