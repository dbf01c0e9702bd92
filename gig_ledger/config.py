"""Configuration management using Pydantic Settings"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./gig_ledger.db"

    # Service
    service_name: str = "gig-ledger"
    log_level: str = "INFO"

    # Billing cycle used until the user saves their own
    default_cycle_start_day: int = 1
    default_cycle_end_day: Optional[int] = None


settings = Settings()
