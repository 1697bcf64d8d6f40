from __future__ import annotations

from typing import Callable, Dict, List

from coin_search.core.contracts import CoinFetcher
from coin_search.core.errors import ProviderNotFoundError

FetcherFactory = Callable[[], CoinFetcher]


class FetcherRegistry:
    def __init__(self) -> None:
        self._factories: Dict[str, FetcherFactory] = {}

    def register(self, provider_id: str, factory: FetcherFactory) -> None:
        self._factories[provider_id] = factory

    def has(self, provider_id: str) -> bool:
        return provider_id in self._factories

    def resolve(self, provider_id: str) -> CoinFetcher:
        factory = self._factories.get(provider_id)
        if factory is None:
            raise ProviderNotFoundError(
                f"Fetcher not found: provider_id={provider_id}, available={self.list_ids()}"
            )
        return factory()

    def list_ids(self) -> List[str]:
        return sorted(self._factories)
