from __future__ import annotations

from typing import List, Optional

from coin_search.core.types import CoinResult


class CoinRow:
    """Display values for one search hit."""

    def __init__(self, coin: CoinResult) -> None:
        self.coin = coin

    @property
    def id(self) -> str:
        return self.coin.id

    @property
    def name(self) -> str:
        return self.coin.name

    @property
    def symbol(self) -> str:
        return self.coin.symbol.upper()

    @property
    def market_cap_rank(self) -> Optional[int]:
        return self.coin.market_cap_rank

    @property
    def rank_label(self) -> str:
        rank = self.coin.market_cap_rank
        return "-" if rank is None else f"#{rank}"

    @property
    def thumb(self) -> str:
        return self.coin.thumb


def build_rows(results: List[CoinResult]) -> List[CoinRow]:
    return [CoinRow(coin) for coin in results]
