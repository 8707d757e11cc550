"""
Application configuration using Pydantic settings.
"""

import enum
from typing import Optional

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class CategorizationMode(str, enum.Enum):
    """Which external tier runs after the dictionary and keyword rules miss."""
    rules_only = "rules_only"
    rules_plus_local = "rules_plus_local"
    rules_plus_local_then_openai = "rules_plus_local_then_openai"
    rules_plus_openai = "rules_plus_openai"


DEFAULT_MODE = CategorizationMode.rules_plus_openai


class Settings(BaseSettings):
    """Application settings."""

    # App
    app_name: str = "Spendah Categorizer"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./data/db.sqlite"

    # Categorization engine
    categorization_mode: str = DEFAULT_MODE.value
    dictionary_min_match_score: float = 0.72
    dictionary_scan_limit: int = 300
    adapter_timeout_seconds: float = 2.5
    normalizer_locale_suffix: str = "india"

    # Local model adapter (POSTs {text, amount, paymentMethod, categories})
    local_model_url: Optional[str] = None

    # Remote model adapter
    ai_model: str = "gpt-4o-mini"
    ai_base_url: Optional[str] = None
    openai_api_key: Optional[str] = None

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    frontend_url: str = "http://localhost:5173"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )


class CategorizationConfig(BaseModel):
    """
    Immutable engine configuration.

    Built once from Settings and handed to the engine so categorization never
    reads process-wide state on its own.
    """

    mode: CategorizationMode = DEFAULT_MODE
    min_match_score: float = 0.72
    scan_limit: int = 300
    adapter_timeout_seconds: float = 2.5
    locale_suffix: str = "india"
    local_model_url: Optional[str] = None
    ai_model: str = "gpt-4o-mini"
    ai_base_url: Optional[str] = None
    openai_api_key: Optional[str] = None

    model_config = {"frozen": True}

    @classmethod
    def from_settings(cls, source: Settings) -> "CategorizationConfig":
        try:
            mode = CategorizationMode(source.categorization_mode.strip().lower())
        except ValueError:
            mode = DEFAULT_MODE

        return cls(
            mode=mode,
            min_match_score=source.dictionary_min_match_score,
            scan_limit=source.dictionary_scan_limit,
            adapter_timeout_seconds=source.adapter_timeout_seconds,
            locale_suffix=source.normalizer_locale_suffix,
            local_model_url=source.local_model_url or None,
            ai_model=source.ai_model,
            ai_base_url=source.ai_base_url or None,
            openai_api_key=source.openai_api_key or None,
        )


# Global settings instance
settings = Settings()
