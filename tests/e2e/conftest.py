"""Shared E2E fixtures.

Mock upstream providers + FakeRedis drive the real signal API app
(routes, pipeline, clients) without any network access.
"""

from __future__ import annotations

from datetime import UTC, datetime

import fakeredis
import httpx
import pytest
from fastapi.testclient import TestClient

from fluxfeed.domain.config import AppConfig, CacheConfig, MarketConfig, NewsConfig, SecretsConfig, get_config
from fluxfeed.infra.cryptonews import CryptoNewsClient
from fluxfeed.infra.market import BinanceClient, CoinGeckoClient
from fluxfeed.services.deps import get_pipeline
from fluxfeed.services.signals.aggregator import SignalAggregator
from fluxfeed.services.signals.app import app
from fluxfeed.services.signals.pipeline import SignalPipeline
from fluxfeed.services.signals.prices import PriceFetcher
from fluxfeed.services.signals.sentiment import SentimentClassifier

from .mock_upstream import BINANCE_URL, COINGECKO_URL, NEWS_URL, UpstreamState, create_mock_transport

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clear_config_cache():
    get_config.cache_clear()
    yield
    get_config.cache_clear()
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Mock upstream
# ---------------------------------------------------------------------------


@pytest.fixture
def upstream_state() -> UpstreamState:
    """Mutable provider state — tests change it directly."""
    return UpstreamState()


@pytest.fixture
def test_redis() -> fakeredis.FakeRedis:
    r = fakeredis.FakeRedis(version=(7,), decode_responses=True)
    yield r
    r.flushall()
    r.close()


# ---------------------------------------------------------------------------
# Pipeline / client factory
# ---------------------------------------------------------------------------


@pytest.fixture
def make_client(upstream_state: UpstreamState):
    """TestClient factory over a pipeline wired to the mock upstream.

    Args (factory):
        news_key: CryptoNews token ("" = news disabled)
        llm: LLM provider, or None for heuristic mode
        cache_client: Redis client to enable the response cache
        pipeline: replaces the wired pipeline entirely
    """

    def _factory(
        *,
        news_key: str = "",
        llm=None,
        cache_client=None,
        pipeline=None,
        raise_server_exceptions: bool = True,
    ) -> TestClient:
        if pipeline is None:
            config = AppConfig(
                secrets=SecretsConfig(openai_api_key="", cryptonews_api_key=news_key),
                news=NewsConfig(base_url=NEWS_URL),
                market=MarketConfig(binance_url=BINANCE_URL, coingecko_url=COINGECKO_URL),
                cache=CacheConfig(enabled=cache_client is not None),
            )
            transport = create_mock_transport(upstream_state)
            pipeline = SignalPipeline(
                news=CryptoNewsClient(
                    config.news,
                    api_key=news_key,
                    client=httpx.AsyncClient(transport=transport, base_url=NEWS_URL),
                ),
                prices=PriceFetcher(
                    BinanceClient(config.market, client=httpx.AsyncClient(transport=transport, base_url=BINANCE_URL)),
                    CoinGeckoClient(
                        config.market, client=httpx.AsyncClient(transport=transport, base_url=COINGECKO_URL)
                    ),
                    config.market,
                ),
                classifier=SentimentClassifier(llm, config.sentiment),
                aggregator=SignalAggregator(llm, config.signal),
                config=config,
                cache_client=cache_client,
            )

        app.dependency_overrides[get_pipeline] = lambda: pipeline
        return TestClient(app, raise_server_exceptions=raise_server_exceptions)

    return _factory


# ---------------------------------------------------------------------------
# Article factory
# ---------------------------------------------------------------------------


@pytest.fixture
def make_article():
    """CryptoNews article dict — valid defaults, published just now."""

    def _factory(title: str, *, sentiment: str | None = None, **overrides) -> dict:
        article = {
            "news_url": f"https://news.example/{abs(hash(title))}",
            "title": title,
            "source_name": "CoinDesk",
            "date": datetime.now(UTC).isoformat(),
            "tickers": ["BTC"],
        }
        if sentiment:
            article["sentiment"] = sentiment
        article.update(overrides)
        return article

    return _factory
