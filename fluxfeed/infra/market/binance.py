"""Binance spot klines client (primary price source)."""

import logging

import httpx

from fluxfeed.domain.config import MarketConfig
from fluxfeed.domain.enums import Timeframe
from fluxfeed.domain.errors import ProviderError

logger = logging.getLogger(__name__)

PROVIDER = "binance"

TICKER_TO_PAIR = {
    "BTC": "BTCUSDT",
    "ETH": "ETHUSDT",
    "BNB": "BNBUSDT",
    "SOL": "SOLUSDT",
    "XRP": "XRPUSDT",
    "ADA": "ADAUSDT",
    "DOGE": "DOGEUSDT",
    "AVAX": "AVAXUSDT",
    "TRX": "TRXUSDT",
    "DOT": "DOTUSDT",
    "LINK": "LINKUSDT",
    "MATIC": "MATICUSDT",
    "LTC": "LTCUSDT",
    "BCH": "BCHUSDT",
    "TON": "TONUSDT",
    "ARB": "ARBUSDT",
    "OP": "OPUSDT",
    "ATOM": "ATOMUSDT",
    "APT": "APTUSDT",
}

TIMEFRAME_TO_INTERVAL = {
    Timeframe.M15: "15m",
    Timeframe.H1: "1h",
    Timeframe.H4: "4h",
    Timeframe.D1: "1d",
}

# kline row: [open_time, open, high, low, close, volume, ...]
CLOSE_INDEX = 4


def map_ticker_to_pair(ticker: str) -> str:
    return TICKER_TO_PAIR.get(ticker, f"{ticker}USDT")


def map_timeframe_to_interval(tf: str) -> str:
    return TIMEFRAME_TO_INTERVAL.get(tf, "1h")


class BinanceClient:
    """Binance public REST client. No API key required."""

    def __init__(self, config: MarketConfig, *, client: httpx.AsyncClient | None = None):
        self._config = config
        self._client = client or httpx.AsyncClient(
            base_url=config.binance_url.rstrip("/"),
            timeout=config.timeout_seconds,
        )

    async def fetch_closes(self, pair: str, interval: str, limit: int | None = None) -> list[float]:
        """Closing prices, oldest first.

        Raises ProviderError on non-2xx (451/403 when the region is blocked),
        transport failures and malformed rows.
        """
        params = {"symbol": pair, "interval": interval, "limit": str(limit or self._config.candle_limit)}
        try:
            resp = await self._client.get("/klines", params=params)
        except httpx.HTTPError as e:
            raise ProviderError(PROVIDER, f"request failed: {e}") from e

        if not resp.is_success:
            raise ProviderError(PROVIDER, f"error {resp.status_code}", status_code=resp.status_code)

        try:
            return [float(row[CLOSE_INDEX]) for row in resp.json()]
        except (ValueError, TypeError, IndexError, KeyError) as e:
            raise ProviderError(PROVIDER, f"malformed klines: {e}") from e

    async def aclose(self) -> None:
        await self._client.aclose()
