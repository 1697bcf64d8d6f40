from coin_search.modules.coin_search.providers.coingecko_fetcher import (
    CoinGeckoFetcher,
)

__all__ = [
    "CoinGeckoFetcher",
]
