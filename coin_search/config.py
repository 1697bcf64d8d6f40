from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class CoinGeckoConfig(BaseModel):
    scheme: str = "https"
    host: str = "api.coingecko.com"
    path: str = "/api/v3/search"

    @property
    def search_url(self) -> str:
        return f"{self.scheme}://{self.host}{self.path}"


class SearchConfig(BaseModel):
    default_provider: str = "coingecko"
    debounce_seconds: float = Field(default=0.5, ge=0.0, le=10.0)
    drop_stale_responses: bool = False


class AppConfig(BaseModel):
    config_file: Path = Path("config/settings.yaml")
    request_timeout_seconds: int = Field(default=20, ge=3, le=120)
    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )
    coingecko: CoinGeckoConfig = Field(default_factory=CoinGeckoConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)

    def normalized(self) -> "AppConfig":
        payload = self.model_dump(mode="python")
        payload["config_file"] = Path(payload["config_file"])
        coingecko = payload["coingecko"]
        coingecko["scheme"] = str(coingecko.get("scheme") or "https").strip().lower()
        coingecko["host"] = str(coingecko.get("host") or "").strip().strip("/")
        path = str(coingecko.get("path") or "").strip()
        coingecko["path"] = path if path.startswith("/") else f"/{path}"
        payload["search"]["default_provider"] = (
            str(payload["search"].get("default_provider") or "").strip().lower()
            or "coingecko"
        )
        return AppConfig.model_validate(payload)


def default_app_config() -> AppConfig:
    return AppConfig()
