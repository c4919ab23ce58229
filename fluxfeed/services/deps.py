"""FastAPI Depends-based DI — shared component factories.

Usage:
    from fluxfeed.services.deps import get_pipeline

    @router.get("/signal")
    async def signal(pipeline: SignalPipeline = Depends(get_pipeline)):
        ...
"""

from functools import lru_cache

from fluxfeed.domain.config import get_config
from fluxfeed.infra.cryptonews import CryptoNewsClient
from fluxfeed.infra.llm import LLMFactory
from fluxfeed.infra.market import BinanceClient, CoinGeckoClient
from fluxfeed.infra.redis import get_redis
from fluxfeed.services.signals.aggregator import SignalAggregator
from fluxfeed.services.signals.pipeline import SignalPipeline
from fluxfeed.services.signals.prices import PriceFetcher
from fluxfeed.services.signals.sentiment import SentimentClassifier


@lru_cache
def get_pipeline() -> SignalPipeline:
    """Signal pipeline wired from settings (singleton).

    Components are stateless; the singleton only shares HTTP connection
    pools across requests.
    """
    config = get_config()
    llm = LLMFactory.create(config)

    return SignalPipeline(
        news=CryptoNewsClient(config.news, api_key=config.secrets.cryptonews_api_key),
        prices=PriceFetcher(BinanceClient(config.market), CoinGeckoClient(config.market), config.market),
        classifier=SentimentClassifier(llm, config.sentiment),
        aggregator=SignalAggregator(llm, config.signal),
        config=config,
        cache_client=get_redis() if config.cache.enabled else None,
    )
