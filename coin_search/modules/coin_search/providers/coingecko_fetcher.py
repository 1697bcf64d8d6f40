from __future__ import annotations

import logging
from typing import List, Optional

import httpx

from coin_search.config import CoinGeckoConfig
from coin_search.core.errors import NetworkError
from coin_search.core.types import CoinResult
from coin_search.infra.http.client import HttpClient
from coin_search.modules.coin_search.decoder import decode_coin_response

logger = logging.getLogger(__name__)


class CoinGeckoFetcher:
    """Coin search against the public CoinGecko ``/search`` endpoint.

    Holds no per-request state, so one instance may serve overlapping calls.
    """

    provider_id = "coingecko"

    QUERY_PARAM = "query"

    def __init__(self, client: HttpClient, api: Optional[CoinGeckoConfig] = None) -> None:
        self.client = client
        self.api = api or CoinGeckoConfig()

    def build_search_url(self, text: str) -> str:
        try:
            url = httpx.URL(self.api.search_url, params={self.QUERY_PARAM: text})
        except (httpx.InvalidURL, UnicodeError) as exc:
            raise NetworkError(f"Couldn't create URL: {exc}") from exc
        if not url.scheme or not url.host:
            raise NetworkError(f"Couldn't create URL: {self.api.search_url}")
        return str(url)

    async def search(self, text: str) -> List[CoinResult]:
        url = self.build_search_url(text)
        logger.debug("coingecko search: %s", url)
        try:
            body = await self.client.get_bytes(url)
        except httpx.HTTPStatusError as exc:
            raise NetworkError(
                f"HTTP {exc.response.status_code} from {exc.request.url.host}"
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise NetworkError(str(exc) or type(exc).__name__) from exc
        response = decode_coin_response(body)
        return list(response.coins)
