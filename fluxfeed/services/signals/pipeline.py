"""Signal pipeline — gather -> classify -> feature-compute -> decide -> respond.

Data Flow:
  CryptoNews ──┐
               ├─> SentimentClassifier (unlabelled items only) ─> aggregate_sentiment ─┐
  Binance ─(fallback)─> CoinGecko ─> compute_features ──────────────────────────────────┴─> SignalAggregator

Every documented degradation is absorbed here so signal/analyze always
reach "respond": missing news token -> no news, news provider error ->
no news, price failure -> 'unavailable' features, LLM failure -> heuristic.
External calls run sequentially, once each, without retries.
"""

import logging
from collections.abc import Awaitable, Callable, Sequence
from datetime import UTC, datetime
from typing import TypeVar

import redis
from pydantic import BaseModel

from fluxfeed.domain.config import AppConfig
from fluxfeed.domain.enums import ProviderSentiment, Timeframe
from fluxfeed.domain.errors import ProviderError
from fluxfeed.domain.news import NewsItem, NewsResponse, PartialNewsItem, aggregate_sentiment
from fluxfeed.domain.signal import AnalyzeRequest, AnalyzeResponse, SignalFeatures, SignalResponse
from fluxfeed.infra.cryptonews import CryptoNewsClient
from fluxfeed.infra.cryptonews.client import UNKNOWN_SOURCE
from fluxfeed.infra.redis import TypedCache

from .aggregator import SignalAggregator
from .prices import PriceFetcher
from .sentiment import SentimentClassifier

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def is_quality_article(item: NewsItem) -> bool:
    """Landing-page filter: http(s) URL and a known source."""
    return bool(item.url) and item.url.startswith("http") and bool(item.source) and item.source != UNKNOWN_SOURCE


def items_from_request(news: Sequence[PartialNewsItem], ticker: str) -> list[NewsItem]:
    """Caller-supplied headlines -> NewsItem, keeping any sentiment/score they carry."""
    now = datetime.now(UTC)
    return [
        NewsItem(
            id=str(idx),
            title=n.title,
            source=n.source,
            url="",
            published_at=n.published_at or now,
            tickers=[ticker],
            sentiment=n.sentiment,
            score=n.score,
        )
        for idx, n in enumerate(news)
    ]


class SignalPipeline:
    """Request-scoped orchestration over shared, stateless components.

    Args:
        news: CryptoNews client
        prices: price fetcher (primary + fallback)
        classifier: headline sentiment classifier
        aggregator: decision step
        config: application settings
        cache_client: Redis client for the short-TTL response cache (None = off)
    """

    def __init__(
        self,
        news: CryptoNewsClient,
        prices: PriceFetcher,
        classifier: SentimentClassifier,
        aggregator: SignalAggregator,
        config: AppConfig,
        *,
        cache_client: redis.Redis | None = None,
    ):
        self._news = news
        self._prices = prices
        self._classifier = classifier
        self._aggregator = aggregator
        self._config = config
        self._cache_client = cache_client

    # ─── Endpoints ──────────────────────────────────────

    async def news(
        self,
        tickers: list[str],
        since_minutes: int,
        *,
        items: int,
        page: int = 1,
        sentiment: ProviderSentiment | None = None,
    ) -> NewsResponse:
        """Ticker news, labelled. Provider errors propagate."""

        async def produce() -> NewsResponse:
            raw = await self._news.fetch_news(tickers, since_minutes, items=items, page=page, sentiment=sentiment)
            return NewsResponse(items=await self._classifier.label_missing(raw))

        key = ("news", ",".join(tickers), since_minutes, items, page, sentiment or "")
        return await self._cached(key, NewsResponse, produce)

    async def general_news(self, *, items: int, page: int = 1) -> NewsResponse:
        """Quality-filtered general news, every item classified independently."""

        async def produce() -> NewsResponse:
            raw = await self._news.fetch_general(items=items, page=page)
            kept = [item for item in raw if is_quality_article(item)]
            return NewsResponse(items=await self._classifier.label_all(kept))

        return await self._cached(("general", items, page), NewsResponse, produce)

    async def signal(self, ticker: str, tf: Timeframe, since_minutes: int) -> SignalResponse:
        """Status/confidence/reasons for one ticker."""

        async def produce() -> SignalResponse:
            news = await self._gather_news(ticker, since_minutes)
            price = await self._prices.fetch_or_degrade(ticker, tf)
            labelled = await self._classifier.label_missing(news)
            features = SignalFeatures(news=aggregate_sentiment(labelled), price=price)
            response = await self._aggregator.decide_signal(features)
            logger.info(
                "[%s/%s] signal=%s confidence=%.0f news=%d price=%s",
                ticker,
                tf,
                response.status,
                response.confidence,
                len(labelled),
                price.source,
            )
            return response

        return await self._cached(("signal", ticker, str(tf), since_minutes), SignalResponse, produce)

    async def analyze(self, request: AnalyzeRequest) -> AnalyzeResponse:
        """Trade plan. Caller-supplied news skips the news provider."""
        ticker = request.ticker
        if request.news:
            news = items_from_request(request.news, ticker)
        else:
            news = await self._gather_news(ticker, request.since_minutes)

        price = await self._prices.fetch_or_degrade(ticker, request.tf)
        labelled = await self._classifier.label_missing(news)
        features = SignalFeatures(news=aggregate_sentiment(labelled), price=price)
        plan = await self._aggregator.plan_trade(features, labelled)
        logger.info(
            "[%s/%s] plan=%s confidence=%.0f entry=%.4f news=%d price=%s",
            ticker,
            request.tf,
            plan.status,
            plan.confidence,
            plan.entry_price,
            len(labelled),
            price.source,
        )
        return plan

    async def tickers_db(self) -> dict:
        return await self._news.fetch_tickers_db()

    async def aclose(self) -> None:
        await self._news.aclose()
        await self._prices.aclose()

    # ─── Helpers ────────────────────────────────────────

    async def _gather_news(self, ticker: str, since_minutes: int) -> list[NewsItem]:
        try:
            return await self._news.fetch_news([ticker], since_minutes)
        except ProviderError as e:
            logger.warning("[%s] News provider failed, continuing without news: %s", ticker, e)
            return []

    async def _cached(self, key_parts: tuple, model_class: type[M], produce: Callable[[], Awaitable[M]]) -> M:
        """Short-TTL Redis cache around produce(). Cache errors never fail a request."""
        if self._cache_client is None:
            return await produce()

        key = ":".join([self._config.cache.key_prefix, *(str(p) for p in key_parts)])
        cache = TypedCache(self._cache_client, key, model_class, ttl=self._config.cache.ttl_seconds)
        try:
            hit = cache.get()
        except redis.RedisError as e:
            logger.warning("Cache read failed for %s: %s", key, e)
            hit = None
        if hit is not None:
            logger.debug("Cache hit %s", key)
            return hit

        value = await produce()
        try:
            cache.set(value)
        except redis.RedisError as e:
            logger.warning("Cache write failed for %s: %s", key, e)
        return value
