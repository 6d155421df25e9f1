from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Server settings; every field can be set through an `APP_*` variable."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="APP_",
        extra="ignore",
        case_sensitive=False,
    )

    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    # HTTP surface
    api_prefix: str = "/api/v1"
    root_path: str = ""
    trusted_hosts: list[str] = ["*"]
    cors_origins: list[str] = [
        "http://localhost:4200",
        "http://127.0.0.1:4200",
        "http://localhost:8000",
        "http://127.0.0.1:8000",
    ]
    cors_origin_regex: str | None = None

    # Supabase project (auth + PostgREST)
    supabase_url: str
    supabase_anon_key: str
    supabase_service_role_key: str

    # Boards
    max_boards_per_user: int = Field(default=20, ge=1)
    default_board_name: str = "Main Board"
    demo_user_email: str = "demo@example.com"

    # Sign in / sign up throttling, per client address
    enable_rate_limiting: bool = True
    max_login_attempts: int = 5
    login_attempt_window: int = 300  # seconds


settings = Settings()
