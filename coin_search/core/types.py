from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr


class CoinResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: StrictStr
    name: StrictStr
    api_symbol: StrictStr
    symbol: StrictStr
    market_cap_rank: Optional[StrictInt] = None
    thumb: StrictStr
    large: StrictStr


class CoinSearchResponse(BaseModel):
    coins: List[CoinResult]
