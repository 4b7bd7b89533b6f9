"""Application configuration using Pydantic settings."""

from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RACEINFO_",
        extra="ignore",
    )

    # Blob storage
    bucket: str = "raceinfo-daily"
    races_key: str = "races.json"
    odds_key: str = "odds.json"
    blob_backend: str = "gcs"  # "gcs" or "local"
    gcs_base_url: str = "https://storage.googleapis.com"
    gcs_token: str = ""
    local_data_dir: Path = Path("./data")

    # Fetch behaviour
    fetch_timeout: float = 30.0
    fill_timeout: Optional[float] = None  # None waits for the fill indefinitely

    # Daily refresh
    timezone: str = "Europe/London"
    refresh_hour: int = 0
    refresh_minute: int = 5

    # App
    log_level: str = "INFO"
    disable_background: bool = False

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Export for convenience
settings = get_settings()


def racing_now() -> datetime:
    """Current time in the racing timezone (GMT/BST automatically)."""
    return datetime.now(settings.tz)
