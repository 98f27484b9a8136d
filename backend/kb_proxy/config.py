"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Application
    app_name: str = "Knowledge Base Proxy"
    app_env: Literal["development", "staging", "production"] = "development"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: list[str] = ["*"]

    # Context API (knowledge-base service)
    context_api_base_url: str = "https://backend.vgvishesh.com"
    api_key: str = ""
    knowledge_base_id: str = ""
    retrieval_top_k: int = 5

    # Upstream timeouts (seconds)
    list_timeout_seconds: float = 8.0
    upstream_timeout_seconds: float = 30.0

    # Generation
    gemini_api_key: str = ""
    generation_model: str = "gemini-2.5-flash"

    # Observability
    log_level: str = "INFO"

    def missing_chat_settings(self) -> list[str]:
        """Return env names of chat settings that are not configured."""
        required = {
            "API_KEY": self.api_key,
            "KNOWLEDGE_BASE_ID": self.knowledge_base_id,
            "GEMINI_API_KEY": self.gemini_api_key,
        }
        return [name for name, value in required.items() if not value]

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
