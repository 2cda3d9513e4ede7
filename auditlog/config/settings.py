# auditlog/config/settings.py

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Application ---
    app_name: str = "school-audit-log"
    environment: Literal["dev", "test", "prod"] = "dev"
    debug: bool = False
    version: str = "0.1.0"

    # --- Database ---
    database_url: str = "sqlite+aiosqlite:///./auditlog.db"
    db_echo: bool = False
    auto_create_schema: bool = False

    # --- Audit log ---
    audit_default_page_size: int = Field(25, ge=1)
    audit_max_page_size: int = Field(100, ge=1)
    audit_retention_days: int = Field(90, ge=1)

    # --- Observability ---
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


@lru_cache
def get_settings() -> AppSettings:
    return AppSettings()

