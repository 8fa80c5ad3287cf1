"""
Application configuration management.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="COMMENTGUARD_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"

    # Policy
    policy_file: Optional[str] = None  # YAML file with policy options
    check_locale: str = "en"
    similarity_threshold: Optional[float] = None


# Global settings instance
settings = Settings()
