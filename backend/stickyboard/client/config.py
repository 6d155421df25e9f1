from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Settings for the board client, read from `STICKYBOARD_*` variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="STICKYBOARD_",
        extra="ignore",
        case_sensitive=False,
    )

    api_url: str = "http://localhost:8000/api/v1"
    log_level: str = "INFO"
    request_timeout: float = 10.0

    # Local key-value store standing in for browser storage
    storage_path: Path = Field(default_factory=lambda: Path.home() / ".stickyboard" / "local_storage.json")

    # Reminder polling
    reminder_interval_seconds: float = 10.0
    reminder_initial_delay_seconds: float = 2.0
    reminder_cleanup_days: int = 7

    # Theme used when no preference has been stored yet
    prefers_dark: bool = False


@lru_cache(maxsize=1)
def get_client_settings() -> ClientSettings:
    return ClientSettings()
