# order_recon/config.py

from typing import Literal, Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Order Recon"
    app_env: str = "development"
    debug: bool = True
    frontend_url: str = "http://localhost:3000"
    host: str = "0.0.0.0"
    port: int = 3005
    log_level: str = "INFO"

    # Reconciliation
    report_timezone: str = "America/New_York"
    eom_skip_lines: int = 2  # EOM exports open with a two-line report banner
    radial_skip_lines: int = 0
    order_prefix_length: int = 5

    # Archive
    archive_backend: Literal["sqlite", "supabase"] = "sqlite"
    archive_db_path: str = "./archive.db"
    archive_table: str = "archive"

    # Supabase (only needed when archive_backend == "supabase")
    supabase_url: Optional[str] = None
    supabase_service_role_key: Optional[str] = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
