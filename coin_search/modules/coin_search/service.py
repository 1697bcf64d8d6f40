from __future__ import annotations

import asyncio
from typing import List, Optional

from coin_search.config import AppConfig
from coin_search.core.contracts import CoinFetcher
from coin_search.core.registry import FetcherRegistry
from coin_search.core.types import CoinResult
from coin_search.infra.http.client import HttpClient
from coin_search.modules.coin_search.pipeline import SearchPipeline
from coin_search.modules.coin_search.providers.coingecko_fetcher import (
    CoinGeckoFetcher,
)


class CoinSearchService:
    def __init__(
        self,
        config: AppConfig,
        client: HttpClient,
        registry: Optional[FetcherRegistry] = None,
    ) -> None:
        self.config = config
        self.client = client
        self.registry = registry or FetcherRegistry()
        if not self.registry.has(CoinGeckoFetcher.provider_id):
            self.registry.register(CoinGeckoFetcher.provider_id, self._build_coingecko)

    def _build_coingecko(self) -> CoinGeckoFetcher:
        return CoinGeckoFetcher(client=self.client, api=self.config.coingecko)

    def fetcher(self, provider_id: Optional[str] = None) -> CoinFetcher:
        chosen = provider_id or self.config.search.default_provider
        return self.registry.resolve(chosen)

    def create_pipeline(
        self,
        provider_id: Optional[str] = None,
        delivery_loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> SearchPipeline:
        return SearchPipeline(
            fetcher=self.fetcher(provider_id),
            debounce_seconds=self.config.search.debounce_seconds,
            drop_stale_responses=self.config.search.drop_stale_responses,
            delivery_loop=delivery_loop,
        )

    async def search_once(self, text: str, provider_id: Optional[str] = None) -> List[CoinResult]:
        """Fetch immediately, bypassing the debounce; errors propagate."""
        return await self.fetcher(provider_id).search(text)
