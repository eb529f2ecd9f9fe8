"""
Application settings using Pydantic.

Provides environment-based configuration loading with BOOTLOADER_ prefix.
Credentials loaded here only ever live in the in-memory working state.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BOOTLOADER_",
        extra="ignore",
    )

    # State
    state_dir: str = "."
    iaas: str = ""

    # Debug
    debug: bool = False

    # Director HTTP client
    retry_attempts: int = 5
    retry_delay: float = 10.0
    http_timeout: float = 30.0

    # GCP
    gcp_service_account_key: str | None = None
    gcp_project_id: str | None = None
    gcp_region: str | None = None
    gcp_zone: str | None = None

    # AWS
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    aws_region: str | None = None

    # Azure
    azure_subscription_id: str | None = None
    azure_tenant_id: str | None = None
    azure_client_id: str | None = None
    azure_client_secret: str | None = None
    azure_region: str | None = None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
