"""
Environment-driven settings.

Each concern reads its own prefix (STORAGE_, SCHEDULER_, NOTIFY_, API_);
top-level values such as LOG_LEVEL come unprefixed or from .env.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "entityhub.db"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @model_validator(mode="after")
    def create_data_dir(self) -> "StorageSettings":
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return self

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class SchedulerSettings(BaseSettings):
    """Compliance cycle configuration."""

    model_config = SettingsConfigDict(env_prefix="SCHEDULER_")

    reminder_horizon_days: int = Field(default=7, ge=0, le=365)
    honor_filing_reminder_days: bool = False

    # Auto-task generation after a filing is advanced
    auto_generate_tasks: bool = True
    default_assignee: str | None = None

    # Per-item retry of transient store errors
    store_max_retries: int = Field(default=3, ge=1)
    retry_delay: float = 0.2

    # Whole-run deadline, None for no limit
    timeout_seconds: float | None = None


class NotificationSettings(BaseSettings):
    """Reminder email transport configuration."""

    model_config = SettingsConfigDict(env_prefix="NOTIFY_")

    provider: Literal["log", "brevo"] = "log"
    api_key: str | None = None
    api_url: str = "https://api.brevo.com/v3/smtp/email"
    sender_name: str = "Entity Hub"
    sender_email: str = "noreply@entityhub.local"
    portal_url: str = "http://localhost:8000"
    timeout: float = 15.0
    max_retries: int = 3
    retry_delay: float = 1.0


class APISettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class Settings(BaseSettings):
    """Root settings object; sub-settings are built from their own env prefixes."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Entity Hub Compliance Engine"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_json: bool = False

    storage: StorageSettings = Field(default_factory=StorageSettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)
    notify: NotificationSettings = Field(default_factory=NotificationSettings)
    api: APISettings = Field(default_factory=APISettings)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Process-wide settings, created on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next get_settings() rereads the environment."""
    global _settings
    _settings = None
