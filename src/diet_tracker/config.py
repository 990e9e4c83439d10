"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    spoonacular_api_key: str
    spoonacular_base_url: str = "https://api.spoonacular.com"
    openfoodfacts_base_url: str = "https://world.openfoodfacts.org"
    http_timeout_seconds: float = 15
    reset_cron: str = "45 3 * * *"
    reset_timezone: str = "UTC"
    reset_batch_size: int = 500
    reset_scheduler_enabled: bool = False
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
