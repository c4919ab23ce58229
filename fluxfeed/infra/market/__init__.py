"""Market data providers."""

from .binance import BinanceClient, map_ticker_to_pair, map_timeframe_to_interval
from .coingecko import CoinGeckoClient, map_ticker_to_asset_id, map_timeframe_to_days

__all__ = [
    "BinanceClient",
    "CoinGeckoClient",
    "map_ticker_to_pair",
    "map_timeframe_to_interval",
    "map_ticker_to_asset_id",
    "map_timeframe_to_days",
]
