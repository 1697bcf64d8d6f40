from __future__ import annotations

from typing import List, Protocol

from coin_search.core.types import CoinResult


class CoinFetcher(Protocol):
    provider_id: str

    async def search(self, text: str) -> List[CoinResult]:
        ...
