"""Settings module using pydantic-settings for configuration management."""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Service Configuration
    service_name: str = Field(default="legacy-labeler")
    environment: str = Field(default="development")
    port: int = Field(default=8010)
    host: str = Field(default="0.0.0.0")

    # Storage Configuration
    documents_root: str = Field(
        default="./Documents",
        description="Folder scanned recursively for PDF/image documents"
    )
    review_data_file: str = Field(
        default="./ReviewData/review_data.json",
        description="JSON file holding the persisted review collection"
    )

    # Logging
    log_level: str = Field(default="INFO")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
