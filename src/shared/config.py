"""
Application configuration using Pydantic Settings.
Loads from environment variables and .env file.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # OpenAI / LLM
    openai_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Ambient credential used when none is passed per call",
    )
    openai_base_url: Optional[str] = Field(default=None)
    openai_model: str = Field(default="gpt-4o-mini")
    openai_temperature: float = Field(default=0.3)
    openai_max_tokens: int = Field(default=800)

    # Matcher settings
    analysis_char_budget: int = Field(
        default=10000, description="Characters per document sent for scoring"
    )
    chat_context_char_budget: int = Field(
        default=1000, description="Characters per document sent as chat context"
    )
    matcher_max_concurrency: int = Field(
        default=1, ge=1, description="Pair evaluations in flight per batch (1 = sequential)"
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="text")

    @property
    def default_credential(self) -> str:
        """Ambient API key, empty string when unset."""
        return self.openai_api_key.get_secret_value().strip()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
