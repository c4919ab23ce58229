"""CoinGecko market chart client (fallback price source, no key required)."""

import logging
import math

import httpx

from fluxfeed.domain.config import MarketConfig
from fluxfeed.domain.enums import Timeframe
from fluxfeed.domain.errors import ProviderError

logger = logging.getLogger(__name__)

PROVIDER = "coingecko"

TICKER_TO_ASSET_ID = {
    "BTC": "bitcoin",
    "ETH": "ethereum",
    "BNB": "binancecoin",
    "SOL": "solana",
    "XRP": "ripple",
    "ADA": "cardano",
    "DOGE": "dogecoin",
    "AVAX": "avalanche-2",
    "TRX": "tron",
    "DOT": "polkadot",
    "LINK": "chainlink",
    "MATIC": "polygon-pos",
    "LTC": "litecoin",
    "BCH": "bitcoin-cash",
    "TON": "toncoin",
    "ARB": "arbitrum",
    "OP": "optimism",
    "ATOM": "cosmos",
    "APT": "aptos",
}

# hourly resolution; the lookback grows with the timeframe
TIMEFRAME_TO_DAYS = {
    Timeframe.M15: 1,
    Timeframe.H1: 1,
    Timeframe.H4: 2,
    Timeframe.D1: 7,
}


def map_ticker_to_asset_id(ticker: str) -> str:
    return TICKER_TO_ASSET_ID.get(ticker, ticker.lower())


def map_timeframe_to_days(tf: str) -> int:
    return TIMEFRAME_TO_DAYS.get(tf, 1)


class CoinGeckoClient:
    """CoinGecko public REST client."""

    def __init__(self, config: MarketConfig, *, client: httpx.AsyncClient | None = None):
        self._config = config
        self._client = client or httpx.AsyncClient(
            base_url=config.coingecko_url.rstrip("/"),
            timeout=config.timeout_seconds,
            headers={"accept": "application/json"},
        )

    async def fetch_closes(self, asset_id: str, days: int) -> list[float]:
        """Hourly USD prices, oldest first. Raises ProviderError when nothing usable comes back."""
        params = {"vs_currency": "usd", "days": str(days), "interval": "hourly"}
        try:
            resp = await self._client.get(f"/coins/{asset_id}/market_chart", params=params)
        except httpx.HTTPError as e:
            raise ProviderError(PROVIDER, f"request failed: {e}") from e

        if not resp.is_success:
            raise ProviderError(PROVIDER, f"error {resp.status_code}", status_code=resp.status_code)

        try:
            points = resp.json().get("prices") or []
        except (ValueError, AttributeError) as e:
            raise ProviderError(PROVIDER, "invalid JSON payload") from e

        closes = []
        for point in points:
            try:
                value = float(point[1])
            except (TypeError, ValueError, IndexError):
                continue
            if math.isfinite(value):
                closes.append(value)

        if not closes:
            raise ProviderError(PROVIDER, "empty prices")
        return closes

    async def aclose(self) -> None:
        await self._client.aclose()
