"""Application configuration using Pydantic settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: Literal["development", "staging", "production"] = "development"
    app_debug: bool = False
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    # Public URLs baked into generated embed codes and packages
    app_url: str = "http://localhost:3000"
    api_url: str = "http://localhost:3000/api"

    # LLM Providers
    openai_api_key: str = ""
    anthropic_api_key: str = ""

    # LiteLLM
    litellm_primary_model: str = "gpt-4o-mini"
    litellm_fallback_model: str = "gpt-4o"
    llm_temperature: float = 0.7
    llm_max_tokens: int = 2048

    # Firestore
    firestore_emulator_host: str | None = None
    gcp_project_id: str = ""

    # Google OAuth
    google_client_id: str = ""
    google_client_secret: str = ""
    google_calendar_client_id: str = ""
    google_calendar_client_secret: str = ""
    google_redirect_uri: str = ""
    http_timeout_seconds: float = 15.0

    # Stripe
    stripe_secret_key: str = ""

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    # Chat
    chat_history_limit: int = 10
    agent_conversations_limit: int = 10

    # Deployment packages
    package_ttl_days: int = 30
    support_contact: str = "support@agenly.com"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def oauth_redirect_uri(self) -> str:
        """Redirect URI registered with Google for the OAuth callback."""
        return self.google_redirect_uri or f"{self.app_url}/api/auth/callback/google"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
