"""Environment configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Interview tuning
    confidence_target: float = 0.82  # suggest once confidence reaches this with no conflicts
    max_rounds: int = 8
    close_call_max_gap: float = 1.0
    confidence_plateau_delta: float = 0.05
    min_top_score_for_high_confidence: float = 3.0
    max_candidates: int = 6

    # Onboarding document store
    document_ttl: int = 7 * 24 * 3600  # abandoned onboarding expires after a week
    max_documents: int = 1000

    # Canonical industry catalog (falls back to built-in defaults if missing)
    industries_json_path: str = "data/industries.json"

    # Rate limiting
    rate_limit_per_minute: int = 30

    # Server configuration
    port: int = 3000
    host: str = "0.0.0.0"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    environment: Literal["development", "production"] = "development"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
