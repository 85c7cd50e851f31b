"""core/config.py — Application configuration via Pydantic BaseSettings.

Loads environment variables from .env (and the OS environment) exactly
once. The resulting Settings object is frozen and handed to create_app(),
which stores it on app.state; route handlers receive it via Depends().

Usage:
    from core.config import get_settings

    settings = get_settings()
    if settings.is_production:
        ...
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# .env lives in the project root (one level above backend/)
_ENV_FILE = Path(__file__).parent.parent.parent / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Database
    database_url: str = "sqlite:///./predictions.db"

    # Admin gate — single shared secret
    admin_password: str = "admin123"
    require_admin_for_writes: bool = True

    # Server
    port: int = 5000

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    log_file: str = "logs/app.log"   # empty string disables file output

    # CORS — the betting frontend may be served from anywhere
    allowed_origins: list[str] = ["*"]

    @field_validator("log_level", mode="before")
    @classmethod
    def _uppercase_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide Settings, reading the environment on first call only."""
    return Settings()
