"""Application settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[3]


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    app_name: str = "fake-cloudwatch-logs"
    host: str = "127.0.0.1"
    port: int = Field(default=0, ge=0, le=65535)
    default_list_limit: int = Field(default=50, ge=1)
    default_events_limit: int = Field(default=10000, ge=1)
    cache_dir: Path | None = None
    log_level: str = "warning"
    startup_timeout_s: float = Field(default=5.0, ge=0.1)

    model_config = SettingsConfigDict(
        env_prefix="FAKE_CLOUDWATCH_LOGS_",
        extra="ignore",
        env_file=(PROJECT_ROOT / ".env", PROJECT_ROOT / ".env.local"),
        env_file_encoding="utf-8",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
