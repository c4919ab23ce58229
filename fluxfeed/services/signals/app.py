"""Signal API — news, sentiment and trading suggestions over HTTP.

Endpoints:
    GET  /news?tickers=BTC,ETH&since=1440&items=50&page=1&sentiment=positive -> NewsResponse
    GET  /news/general?items=12&page=1                                      -> NewsResponse
    GET  /signal?ticker=BTC&tf=1h&since=60                                   -> SignalResponse
    POST /analyze                                                            -> AnalyzeResponse
    GET  /tickersdb                                                          -> provider passthrough
    GET  /health                                                             -> HealthStatus

Every route is also served under /api for the dashboard front-end.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends
from fastapi.middleware.cors import CORSMiddleware

from fluxfeed.domain.config import get_config
from fluxfeed.domain.enums import ProviderSentiment, Timeframe
from fluxfeed.domain.news import NewsResponse
from fluxfeed.domain.signal import AnalyzeRequest, AnalyzeResponse, SignalResponse
from fluxfeed.infra.observability import setup_logging
from fluxfeed.services.base import create_app
from fluxfeed.services.deps import get_pipeline

from .pipeline import SignalPipeline

logger = logging.getLogger(__name__)

router = APIRouter(tags=["signals"])


def parse_tickers(raw: str | None) -> list[str]:
    """'btc, eth,' -> ['BTC', 'ETH']. Defaults to BTC."""
    tickers = [t.strip().upper() for t in (raw or "").split(",") if t.strip()]
    return tickers or ["BTC"]


def parse_provider_sentiment(raw: str | None) -> ProviderSentiment | None:
    """Unknown filter values are ignored rather than rejected."""
    try:
        return ProviderSentiment(raw.lower()) if raw else None
    except ValueError:
        return None


@router.get("/news")
async def get_news(
    tickers: str | None = None,
    ticker: str | None = None,
    since: int | None = None,
    items: int | None = None,
    page: int = 1,
    sentiment: str | None = None,
    pipeline: SignalPipeline = Depends(get_pipeline),
) -> NewsResponse:
    """Ticker news with sentiment on every item."""
    config = get_config().news
    return await pipeline.news(
        parse_tickers(tickers or ticker),
        since if since is not None else config.default_since_minutes,
        items=min(config.max_items, items if items is not None else config.default_items),
        page=max(1, page),
        sentiment=parse_provider_sentiment(sentiment),
    )


@router.get("/news/general")
async def get_general_news(
    items: int | None = None,
    page: int = 1,
    pipeline: SignalPipeline = Depends(get_pipeline),
) -> NewsResponse:
    """Curated general news, quality-filtered and classified."""
    config = get_config().news
    return await pipeline.general_news(
        items=min(config.max_items, items if items is not None else config.general_items),
        page=max(1, page),
    )


@router.get("/signal")
async def get_signal(
    ticker: str = "BTC",
    tf: Timeframe = Timeframe.H1,
    since: int | None = None,
    pipeline: SignalPipeline = Depends(get_pipeline),
) -> SignalResponse:
    """BUY/SELL/NEUTRAL with confidence and reasons."""
    since_minutes = since if since is not None else get_config().signal.default_since_minutes
    return await pipeline.signal(ticker.strip().upper() or "BTC", tf, since_minutes)


@router.post("/analyze")
async def analyze(
    request: AnalyzeRequest,
    pipeline: SignalPipeline = Depends(get_pipeline),
) -> AnalyzeResponse:
    """Trade plan with entry/stop/take and rationale."""
    return await pipeline.analyze(request)


@router.get("/tickersdb")
async def get_tickers_db(pipeline: SignalPipeline = Depends(get_pipeline)) -> dict:
    """News provider ticker database (rate-limited upstream)."""
    return await pipeline.tickers_db()


@asynccontextmanager
async def lifespan(app):
    config = get_config()
    setup_logging("signal-api", log_level=config.log_level, json_output=config.json_logs)
    logger.info(
        "LLM=%s news=%s cache=%s",
        "on" if config.has_llm else "heuristic",
        "on" if config.has_news else "off",
        "on" if config.cache.enabled else "off",
    )

    yield

    if get_pipeline.cache_info().currsize:
        await get_pipeline().aclose()
        get_pipeline.cache_clear()


app = create_app("signal-api", version="1.0.0", lifespan=lifespan, dependencies=["cache"])

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
app.include_router(router, prefix="/api", include_in_schema=False)
