"""Price Fetcher — Binance klines with CoinGecko fallback -> PriceFeatures."""

import logging

from fluxfeed.domain.config import MarketConfig
from fluxfeed.domain.enums import PriceSource, Timeframe
from fluxfeed.domain.errors import ProviderError
from fluxfeed.domain.market import PriceFeatures
from fluxfeed.infra.market import (
    BinanceClient,
    CoinGeckoClient,
    map_ticker_to_asset_id,
    map_ticker_to_pair,
    map_timeframe_to_days,
    map_timeframe_to_interval,
)

from .features import compute_features

logger = logging.getLogger(__name__)


class PriceFetcher:
    """Primary/fallback price source orchestration.

    Args:
        binance: primary candle source
        coingecko: fallback price series source
        config: market settings (SMA window, candle limit)
    """

    def __init__(self, binance: BinanceClient, coingecko: CoinGeckoClient, config: MarketConfig):
        self._binance = binance
        self._coingecko = coingecko
        self._config = config

    async def fetch(self, ticker: str, tf: Timeframe | str) -> PriceFeatures:
        """Binance first; CoinGecko after any Binance failure.

        Raises ProviderError only when the fallback fails as well.
        """
        pair = map_ticker_to_pair(ticker)
        interval = map_timeframe_to_interval(tf)
        try:
            closes = await self._binance.fetch_closes(pair, interval, self._config.candle_limit)
            return self._build(pair, interval, closes, PriceSource.BINANCE)
        except ProviderError as e:
            logger.info("[%s] Binance unavailable (%s), trying CoinGecko", ticker, e)

        return await self._fetch_fallback(ticker, tf)

    async def fetch_or_degrade(self, ticker: str, tf: Timeframe | str) -> PriceFeatures:
        """fetch(), or the all-zero 'unavailable' features when every source failed."""
        try:
            return await self.fetch(ticker, tf)
        except ProviderError as e:
            logger.warning("[%s] Price feed unavailable, degrading to news-only: %s", ticker, e)
            return PriceFeatures.unavailable(map_ticker_to_pair(ticker), str(tf))

    async def _fetch_fallback(self, ticker: str, tf: Timeframe | str) -> PriceFeatures:
        asset_id = map_ticker_to_asset_id(ticker)
        closes = await self._coingecko.fetch_closes(asset_id, map_timeframe_to_days(tf))
        return self._build(f"{ticker}USD", str(tf), closes, PriceSource.COINGECKO)

    def _build(self, pair: str, interval: str, closes: list[float], source: PriceSource) -> PriceFeatures:
        feats = compute_features(closes, self._config.sma_window)
        return PriceFeatures(
            pair=pair,
            interval=interval,
            last=feats.last,
            pct_change=feats.pct_change,
            momentum=feats.momentum,
            volatility=feats.volatility,
            source=source,
        )

    async def aclose(self) -> None:
        await self._binance.aclose()
        await self._coingecko.aclose()
