from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="COIN_SEARCH_",
        env_file=".env",
        extra="ignore",
    )

    config_file: Path = Path("config/settings.yaml")
    log_level: str = "WARNING"
