"""Typed settings configuration - single source of truth."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database (in-memory stores when unset)
    database_url: str | None = None

    # Quota backend (primary store when unset)
    redis_url: str | None = None
    usage_retention_days: int = 30

    # Classification service (OpenAI-compatible API, Groq by default)
    llm_api_key: SecretStr | None = None
    llm_base_url: str = "https://api.groq.com/openai/v1"
    llm_model: str = "llama-3.1-8b-instant"
    llm_timeout_seconds: float = 20.0

    # Auth
    jwt_secret: SecretStr = SecretStr("dev-secret-change-me")
    jwt_expires_days: int = 7
    password_hasher: Literal["bcrypt", "plaintext"] = "bcrypt"

    # Ingestion
    daily_request_limit: int = 5
    fetch_timeout_seconds: float = 10.0

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
